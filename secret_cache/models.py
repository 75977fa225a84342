"""
Result models returned by the remote secret store.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DescribeSecretResult(BaseModel):
    """Secret metadata: which version carries which stages."""

    name: Optional[str] = None
    arn: Optional[str] = None
    version_ids_to_stages: Optional[Dict[str, Optional[List[str]]]] = None

    def version_for_stage(self, version_stage: str) -> Optional[str]:
        """Return the first version id labelled with the given stage."""
        if not self.version_ids_to_stages:
            return None
        for version_id, stages in self.version_ids_to_stages.items():
            # Versions without a stage list never match
            if stages and version_stage in stages:
                return version_id
        return None


class GetSecretValueResult(BaseModel):
    """A single secret version's payload."""

    model_config = ConfigDict(ser_json_bytes="base64", val_json_bytes="base64")

    name: Optional[str] = None
    arn: Optional[str] = None
    version_id: Optional[str] = None
    secret_string: Optional[str] = None
    secret_binary: Optional[bytes] = None
    version_stages: Optional[List[str]] = Field(default=None)
    created_date: Optional[datetime] = None

    @field_validator("secret_binary", mode="before")
    @classmethod
    def _copy_binary(cls, value):
        # Detach from any mutable buffer handed over by the client
        if isinstance(value, (bytearray, memoryview)):
            return bytes(value)
        return value

    def clone(self) -> "GetSecretValueResult":
        """Return a copy that shares no mutable state with this result."""
        return self.model_copy(deep=True)
