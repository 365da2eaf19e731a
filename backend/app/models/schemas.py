from pydantic import BaseModel, Field
from typing import List, Optional

class NoticeOut(BaseModel):
    severity: str
    html: str
    text: str

class FormActionOut(BaseModel):
    name: str
    title: str
    description: str
    enabled: bool
    use_button_tag: bool = True
    extra_classes: str = ""

class FormActionsResponse(BaseModel):
    record_id: int
    version: Optional[str] = None
    actions: List[FormActionOut] = Field(default_factory=list)
