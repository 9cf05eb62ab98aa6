"""
Widget endpoint contracts.
"""
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ResolveWidgetRequest(BaseModel):
    # Renders without a page id are allowed and yield the no_container state
    container_id: Optional[str] = Field(default=None, max_length=255)
    widget_id: str = Field(min_length=1, max_length=255)
    is_editor: bool = False

    @field_validator('container_id', 'widget_id', mode='before')
    @classmethod
    def _to_text(cls, value):
        if value is None:
            return None
        return str(value).strip()


class WidgetAssignmentRequest(BaseModel):
    container_id: str = Field(min_length=1, max_length=255)
    widget_id: str = Field(min_length=1, max_length=255)
