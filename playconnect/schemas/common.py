"""
Common Pydantic schemas
"""

from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, field_validator

from playconnect.utils.timeutils import as_utc

def to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)

class DocumentModel(BaseModel):
    """Read model built from an ORM row or a document store dict (camelCase keys)"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

class StandardResponse(BaseModel):
    """Standard API response"""
    success: bool
    message: str
    data: Optional[Any] = None

class ErrorResponse(BaseModel):
    """Error response schema"""
    success: bool = False
    message: str
    error_code: Optional[str] = None
    details: Optional[Any] = None

def utc_datetime(value: Optional[datetime]) -> Optional[datetime]:
    return as_utc(value) if isinstance(value, datetime) else value

class TimestampedModel(DocumentModel):
    """Coerces every datetime field to aware UTC"""

    @field_validator("*", mode="after")
    @classmethod
    def _aware_utc(cls, value):
        return utc_datetime(value)
