"""
Schemas Pydantic para os registros lidos do Supabase
"""
from pydantic import BaseModel, ConfigDict, field_validator
from datetime import datetime, timezone
from typing import Optional


class SourceRecord(BaseModel):
    id: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Timestamps sem fuso são tratados como UTC
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class UserRecord(SourceRecord):
    role: Optional[str] = None


class UploadRecord(SourceRecord):
    status: Optional[str] = None
    crop_type: Optional[str] = None
    admin_feedback: Optional[str] = None


class SchemeRecord(SourceRecord):
    pass


class ContactRecord(SourceRecord):
    pass
