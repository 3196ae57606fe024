"""
Typed results produced from rendered templates.

Rendered response templates are JSON documents using camelCase field names:

    {
      "statusCode": 201,
      "headers": {"Content-Type": ["application/json"]},
      "body": {"id": "{{uuid}}"},
      "delay": {"timeUnit": "MILLISECONDS", "value": 50}
    }
"""

import json
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TimeUnit(str, Enum):
    MILLISECONDS = "MILLISECONDS"
    SECONDS = "SECONDS"
    MINUTES = "MINUTES"


class DelayDTO(BaseModel):
    """How long to wait before sending a response."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    time_unit: TimeUnit = Field(default=TimeUnit.MILLISECONDS, alias="timeUnit")
    value: int = Field(default=0, ge=0)

    def to_seconds(self) -> float:
        if self.time_unit == TimeUnit.SECONDS:
            return float(self.value)
        if self.time_unit == TimeUnit.MINUTES:
            return self.value * 60.0
        return self.value / 1000.0


class HttpResponseDTO(BaseModel):
    """A response described by a rendered response template."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    status_code: int = Field(default=200, alias="statusCode", ge=100, le=599)
    reason_phrase: Optional[str] = Field(default=None, alias="reasonPhrase")
    headers: Dict[str, List[str]] = Field(default_factory=dict)
    cookies: Dict[str, str] = Field(default_factory=dict)
    body: Union[str, Dict[str, Any], List[Any], None] = None
    delay: Optional[DelayDTO] = None

    @field_validator("headers", mode="before")
    @classmethod
    def single_values_to_lists(cls, value: Any) -> Any:
        """Accept {"name": "value"} as well as {"name": ["value"]}."""
        if isinstance(value, dict):
            return {
                name: values if isinstance(values, list) else [values]
                for name, values in value.items()
            }
        return value

    def content_type(self) -> Optional[str]:
        for name, values in self.headers.items():
            if name.lower() == "content-type" and values:
                return values[0]
        if isinstance(self.body, (dict, list)):
            return "application/json"
        return None

    def body_bytes(self) -> bytes:
        if self.body is None:
            return b""
        if isinstance(self.body, (dict, list)):
            return json.dumps(self.body).encode("utf-8")
        return self.body.encode("utf-8")
