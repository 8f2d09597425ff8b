"""
Data models for the control-plane payloads using Pydantic for validation.
"""

from typing import Dict

from pydantic import BaseModel, field_validator


class InstanceDescriptor(BaseModel):
    """Identifies the compute instance the bot controls."""
    name: str
    project: str
    zone: str

    model_config = {"frozen": True}

    @field_validator('name', 'project', 'zone')
    @classmethod
    def validate_non_empty(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('must not be empty')
        return v

    @property
    def key(self) -> str:
        """Stable identifier used for locking and log lines."""
        return f"{self.project}/{self.zone}/{self.name}"

    def to_body(self) -> Dict[str, str]:
        """JSON body sent with every control-plane request."""
        return {"name": self.name, "project": self.project, "zone": self.zone}
