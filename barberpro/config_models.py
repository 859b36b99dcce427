"""
Pydantic configuration models with validation.
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional


class ReminderConfig(BaseModel):
    """Appointment reminder configuration."""
    enabled: bool = Field(True, description="Enable appointment reminders")
    poll_interval_seconds: float = Field(30.0, gt=0, le=600, description="Seconds between reminder checks")
    lookahead_min_minutes: float = Field(4.0, ge=0, description="Band lower bound (exclusive)")
    lookahead_max_minutes: float = Field(6.0, gt=0, description="Band upper bound (inclusive)")
    alarm_repeat_seconds: float = Field(3.0, gt=0, le=60, description="Seconds between repeated alarm chimes")
    continuous_alarm: bool = Field(True, description="Repeat the chime until dismissed")
    os_notifications: bool = Field(True, description="Raise OS notifications when permitted")

    @model_validator(mode='after')
    def validate_band(self):
        if self.lookahead_max_minutes <= self.lookahead_min_minutes:
            raise ValueError(
                'lookahead_max_minutes must be greater than lookahead_min_minutes'
            )
        return self


class BackupConfig(BaseModel):
    """Cloud backup throttling configuration."""
    enabled: bool = Field(True, description="Enable cloud backup")
    sync_interval_hours: float = Field(24.0, gt=0, description="Minimum hours between automatic pushes")
    check_interval_seconds: float = Field(3600.0, gt=0, description="Seconds between periodic throttle checks")
    last_sync_key: str = Field("barber-last-cloud-sync", description="Local key holding the last sync time")

    @field_validator('last_sync_key')
    @classmethod
    def validate_key(cls, v):
        if not v.strip():
            raise ValueError('last_sync_key cannot be empty')
        return v

    @property
    def sync_interval_seconds(self) -> float:
        return self.sync_interval_hours * 3600.0


class SupabaseConfig(BaseModel):
    """Supabase remote store configuration."""
    url: Optional[str] = Field(None, description="Supabase project URL")
    key: Optional[str] = Field(None, description="Supabase API key")
    table_name: str = Field("user_data", description="Table holding one record per owner")
    owner_column: str = Field("user_id", description="Column keying the record")

    @field_validator('url')
    @classmethod
    def validate_url(cls, v):
        if v and not v.startswith(('http://', 'https://')):
            raise ValueError('Supabase URL must start with http:// or https://')
        return v.rstrip('/') if v else v


class LocalStoreConfig(BaseModel):
    """Local key-value store configuration."""
    path: str = Field("data/barber_state.json", description="JSON file holding local state")
    indent: Optional[int] = Field(2, ge=0, le=8, description="JSON indentation (None for compact)")
