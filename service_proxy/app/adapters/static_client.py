"""
Evaluation client backed by a static set of feature definitions.
"""

import copy
import json
import threading
from typing import Any, Callable, Dict, List, Optional

import pydantic

from shared.errors import UpstreamError
from shared.logging import get_logger

from .evaluation_client import EvaluationClient, ToggleStatus, Variant, disabled_variant


class StaticEvaluationClient(EvaluationClient):
    """Serves toggles exactly as defined, without strategy evaluation.

    Definitions come from ``features`` or from a JSON bootstrap file shaped
    like the client features API (``{"version": 2, "features": [...]}``, or a
    bare list). A toggle is enabled iff its definition is enabled; the context
    is accepted but not consulted.
    """

    def __init__(self, bootstrap_file: Optional[str] = None, features: Optional[List[Dict[str, Any]]] = None):
        self.bootstrap_file = bootstrap_file
        self.logger = get_logger("proxy.static_client")
        self._initial_features = features
        self._features: Dict[str, Dict[str, Any]] = {}
        self._variants: Dict[str, List[Variant]] = {}
        self._metrics: Dict[str, Dict[str, int]] = {}
        self._lock = threading.Lock()
        self._ready = False
        self._listeners: List[Callable[[], None]] = []

    async def start(self) -> None:
        if self._initial_features is not None:
            definitions = self._initial_features
        else:
            definitions = self._load_bootstrap_file()
        self._set_features(definitions)
        self._emit_ready()

    def _load_bootstrap_file(self) -> List[Dict[str, Any]]:
        if not self.bootstrap_file:
            self.logger.warning("No bootstrap file configured, serving no features")
            return []

        try:
            with open(self.bootstrap_file, "r", encoding="utf-8") as handle:
                document = json.load(handle)
        except (OSError, ValueError) as e:
            raise UpstreamError(
                "bootstrap",
                f"Could not load feature definitions from {self.bootstrap_file}",
                details={"error": str(e)}
            ) from e

        if isinstance(document, list):
            return document
        if isinstance(document, dict):
            return document.get("features", [])
        raise UpstreamError("bootstrap", "Feature definitions must be a list or an object")

    def _set_features(self, definitions: List[Dict[str, Any]]) -> None:
        features: Dict[str, Dict[str, Any]] = {}
        variants: Dict[str, List[Variant]] = {}
        for definition in definitions:
            name = definition.get("name") if isinstance(definition, dict) else None
            if not isinstance(name, str) or not name:
                self.logger.warning("Skipping feature definition without a name", definition=definition)
                continue
            features[name] = definition
            variants[name] = self._parse_variants(name, definition.get("variants") or [])
        self._features = features
        self._variants = variants

    def _parse_variants(self, feature_name: str, raw_variants: Any) -> List[Variant]:
        if not isinstance(raw_variants, list):
            self.logger.warning("Ignoring non-list variants", feature=feature_name)
            return []

        parsed: List[Variant] = []
        for raw in raw_variants:
            name = raw.get("name") if isinstance(raw, dict) else None
            if not isinstance(name, str) or not name:
                self.logger.warning("Skipping variant without a name", feature=feature_name, variant=raw)
                continue
            try:
                parsed.append(Variant(name=name, enabled=True, payload=raw.get("payload")))
            except pydantic.ValidationError as e:
                self.logger.warning("Skipping malformed variant", feature=feature_name, variant=name, error=str(e))
        return parsed

    def _emit_ready(self) -> None:
        with self._lock:
            if self._ready:
                return
            self._ready = True
            listeners, self._listeners = self._listeners, []

        self.logger.info("Feature definitions loaded", feature_count=len(self._features))
        for listener in listeners:
            listener()

    def is_ready(self) -> bool:
        return self._ready

    def on_ready(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if not self._ready:
                self._listeners.append(callback)
                return
        callback()

    def _status(self, definition: Dict[str, Any]) -> ToggleStatus:
        enabled = bool(definition.get("enabled"))
        variants = self._variants.get(definition["name"], [])

        variant = disabled_variant()
        if enabled and len(variants) == 1:
            variant = variants[0]

        return ToggleStatus(
            name=definition["name"],
            enabled=enabled,
            impression_data=bool(definition.get("impressionData")),
            variant=variant,
        )

    async def get_enabled_toggles(self, context: Dict[str, Any]) -> List[ToggleStatus]:
        return [
            self._status(definition)
            for definition in self._features.values()
            if definition.get("enabled")
        ]

    async def get_defined_toggles(self, toggle_names: List[str], context: Dict[str, Any]) -> List[ToggleStatus]:
        return [
            self._status(self._features[name])
            for name in toggle_names
            if name in self._features
        ]

    async def register_metrics(self, metrics: Any) -> None:
        with self._lock:
            for name, count in metrics.bucket.toggles.items():
                totals = self._metrics.setdefault(name, {"yes": 0, "no": 0})
                totals["yes"] += count.yes
                totals["no"] += count.no

        self.logger.info(
            "Client metrics registered",
            app_name=metrics.app_name,
            instance_id=metrics.instance_id,
            toggle_count=len(metrics.bucket.toggles),
        )

    async def get_feature_toggle_definitions(self) -> List[Dict[str, Any]]:
        return [copy.deepcopy(definition) for definition in self._features.values()]

    def get_metrics_summary(self) -> Dict[str, Dict[str, int]]:
        """Accumulated yes/no counts per toggle."""
        with self._lock:
            return {name: dict(totals) for name, totals in self._metrics.items()}
