from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class AgentDefinition:
    id: str
    title: str
    short_description: str
    enabled: bool


VISION_AGENT = AgentDefinition(
    id="vision",
    title="Vision",
    short_description="Snapshot-scoped narrative responses with citations.",
    enabled=True,
)

# Locked agents answer with the not-available phrase and nothing else.
AGENTS: List[AgentDefinition] = [
    VISION_AGENT,
    AgentDefinition(
        id="quant",
        title="Quant",
        short_description="Locked. No derived metrics or calculations are permitted.",
        enabled=False,
    ),
    AgentDefinition(
        id="strategist",
        title="Strategist",
        short_description="Locked. No advice or predictions.",
        enabled=False,
    ),
    AgentDefinition(
        id="auditor",
        title="Auditor",
        short_description="Locked. Guardrails and evidence-only mode.",
        enabled=False,
    ),
]


def get_agent(agent_id: Optional[str]) -> AgentDefinition:
    for a in AGENTS:
        if a.id == agent_id:
            return a
    return VISION_AGENT
