from typing import Optional

from pydantic import BaseModel, ConfigDict


class MetricValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    snapshot_id: Optional[str] = None
    metric_key: str
    value_text: Optional[str] = None
    source_page: Optional[str] = None
    created_at: Optional[str] = None
