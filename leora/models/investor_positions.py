from typing import Optional

from pydantic import BaseModel, ConfigDict


class InvestorPosition(BaseModel):
    model_config = ConfigDict(frozen=True)

    investor_id: Optional[str] = None
    snapshot_id: Optional[str] = None
    summary_text: Optional[str] = None
    narrative_text: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
