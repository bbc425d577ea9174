from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

SnapshotKind = Literal["monthly", "project"]


class Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    investor_id: Optional[str] = None
    snapshot_kind: Optional[SnapshotKind] = None
    snapshot_month: Optional[str] = None
    project_key: Optional[str] = None
    created_at: Optional[str] = None
    label: Optional[str] = None
