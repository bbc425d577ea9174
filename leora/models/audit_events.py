from typing import Optional

from pydantic import BaseModel, ConfigDict


class AuditEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    event_type: str
    snapshot_id: Optional[str] = None
    snapshot_label: Optional[str] = None
    occurred_at: str
    note: Optional[str] = None
