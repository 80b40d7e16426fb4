"""
Client metrics schema.

SDKs post usage counts per toggle for a time bucket:

    {
        "appName": "web",
        "instanceId": "browser-1",
        "environment": "production",
        "bucket": {
            "start": "2024-01-01T00:00:00Z",
            "stop": "2024-01-01T00:01:00Z",
            "toggles": {"new-checkout": {"yes": 10, "no": 2, "variants": {"blue": 4}}}
        }
    }

Unknown keys are dropped. ``yes``/``no`` default to 0 and an empty or missing
``instanceId`` becomes ``"default"``.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Annotated, Any, Dict, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from shared.errors import MetricsValidationError

NonNegativeCount = Annotated[int, Field(ge=0)]


class ToggleCount(BaseModel):
    """Evaluation counts for one toggle."""

    model_config = ConfigDict(extra="ignore")

    yes: NonNegativeCount = 0
    no: NonNegativeCount = 0
    variants: Dict[str, NonNegativeCount] = Field(default_factory=dict)

    @field_validator("yes", "no", mode="before")
    @classmethod
    def empty_count_is_zero(cls, value: Any) -> Any:
        if value is None or value == "":
            return 0
        return value


class MetricsBucket(BaseModel):
    model_config = ConfigDict(extra="ignore")

    start: datetime
    stop: datetime
    toggles: Dict[str, ToggleCount] = Field(default_factory=dict)


class ClientMetrics(BaseModel):
    """Validated client metrics payload."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    app_name: str = Field(..., alias="appName", min_length=1)
    instance_id: str = Field(default="default", alias="instanceId")
    environment: Optional[str] = None
    bucket: MetricsBucket

    @field_validator("instance_id", mode="before")
    @classmethod
    def default_instance_id(cls, value: Any) -> Any:
        if value is None or value == "":
            return "default"
        return value


@dataclass
class ValidationResult:
    error: Optional[MetricsValidationError] = None
    value: Optional[ClientMetrics] = None


class MetricsSchemaValidator:
    """Validates raw metrics bodies against ``ClientMetrics``."""

    def validate(self, payload: Any) -> ValidationResult:
        try:
            value = ClientMetrics.model_validate(payload)
        except pydantic.ValidationError as exc:
            return ValidationResult(
                error=MetricsValidationError(
                    details={"errors": exc.errors(include_url=False, include_context=False)}
                )
            )
        return ValidationResult(value=value)
