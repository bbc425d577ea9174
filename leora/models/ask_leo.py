from typing import List

from pydantic import BaseModel, ConfigDict


class AskLeoCitation(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    type: str = "—"
    date: str = "—"
    url: str = "—"


class AskLeoSections(BaseModel):
    model_config = ConfigDict(frozen=True)

    summary: str
    what_changed: str = ""
    context: str = ""
    citations: List[AskLeoCitation] = []
