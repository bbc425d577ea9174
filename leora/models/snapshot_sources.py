from typing import Optional

from pydantic import BaseModel, ConfigDict


class SnapshotSource(BaseModel):
    # No unique id; deduplication is the caller's concern.
    model_config = ConfigDict(frozen=True)

    source_type: Optional[str] = None
    title: Optional[str] = None
    url: Optional[str] = None
    note: Optional[str] = None
