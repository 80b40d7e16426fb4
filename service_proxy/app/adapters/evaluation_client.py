"""
Evaluation client interface consumed by the proxy.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Variant(BaseModel):
    name: str
    enabled: bool
    payload: Optional[Dict[str, Any]] = None


def disabled_variant() -> Variant:
    return Variant(name="disabled", enabled=False)


class ToggleStatus(BaseModel):
    """Evaluation result for one toggle, serialized with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    enabled: bool
    impression_data: bool = Field(default=False, alias="impressionData")
    variant: Variant = Field(default_factory=disabled_variant)


class EvaluationClient(ABC):
    """Contract between the proxy and the flag evaluation engine."""

    async def start(self) -> None:
        """Begin synchronization. Readiness is announced through ``on_ready``."""

    async def close(self) -> None:
        """Release resources."""

    @abstractmethod
    def is_ready(self) -> bool:
        """Whether the initial synchronization has completed."""

    @abstractmethod
    def on_ready(self, callback: Callable[[], None]) -> None:
        """Register ``callback`` for the one-time ready notification.

        Called immediately when the client is already ready.
        """

    @abstractmethod
    async def get_enabled_toggles(self, context: Dict[str, Any]) -> List[ToggleStatus]:
        ...

    @abstractmethod
    async def get_defined_toggles(self, toggle_names: List[str], context: Dict[str, Any]) -> List[ToggleStatus]:
        ...

    @abstractmethod
    async def register_metrics(self, metrics: Any) -> None:
        ...

    @abstractmethod
    async def get_feature_toggle_definitions(self) -> List[Dict[str, Any]]:
        ...
