"""
Request handling for the proxy endpoints.
"""

import json
from typing import Any, Dict, List, Optional

import pydantic
from fastapi import Request
from pydantic import BaseModel

from shared.errors import ErrorResponse, MetricsValidationError
from shared.logging import get_logger

from ..adapters.evaluation_client import EvaluationClient
from ..validation.metrics_schema import MetricsSchemaValidator
from .context import build_context
from .readiness import ReadinessGate
from .results import ProxyResult
from .tokens import TokenRegistry, TokenSource, authorize

FEATURES_API_VERSION = 2


class LookupRequest(BaseModel):
    """Body of ``POST /``."""
    context: Optional[Dict[str, Any]] = None
    toggles: Optional[List[str]] = None


class ProxyController:
    """Orchestrates readiness, authorization and the evaluation client per endpoint.

    Readiness is checked before authorization on every endpoint except client
    metrics, which is never gated on readiness.
    """

    def __init__(
        self,
        client: EvaluationClient,
        tokens: TokenRegistry,
        header_name: str = "authorization",
        validator: Optional[MetricsSchemaValidator] = None,
        gate: Optional[ReadinessGate] = None,
        logger=None,
        cache_max_age: int = 2,
    ):
        self.client = client
        self.tokens = tokens
        self.header_name = header_name
        self.validator = validator or MetricsSchemaValidator()
        self.logger = logger or get_logger("proxy.controller")
        self.gate = gate or ReadinessGate()
        self.cache_control = f"public, max-age={cache_max_age}"

        if client.is_ready():
            self.gate.mark_ready()
        client.on_ready(self.gate.mark_ready)

    def is_ready(self) -> bool:
        return self.gate.is_ready()

    def set_client_keys(self, client_keys: TokenSource) -> None:
        self.tokens.set_client_keys(client_keys)

    # kept for backward compatibility
    def set_proxy_secrets(self, client_keys: TokenSource) -> None:
        self.set_client_keys(client_keys)

    def _token(self, request: Request) -> Optional[str]:
        return request.headers.get(self.header_name)

    @staticmethod
    async def _read_json(request: Request) -> Any:
        """Parse the body as JSON; an empty body reads as ``{}``."""
        raw = await request.body()
        if not raw.strip():
            return {}
        return json.loads(raw)

    async def health(self) -> ProxyResult:
        if not self.gate.is_ready():
            return ProxyResult.not_ready()
        return ProxyResult.ok_text("ok")

    async def get_enabled_toggles(self, request: Request) -> ProxyResult:
        if not self.gate.is_ready():
            return ProxyResult.not_ready()
        if not authorize(self._token(request), self.tokens.client_keys):
            return ProxyResult.unauthorized()

        peer_address = request.client.host if request.client else None
        context = build_context(request.query_params, peer_address)
        toggles = await self.client.get_enabled_toggles(context)
        return ProxyResult.ok({"toggles": toggles}, headers={"Cache-Control": self.cache_control})

    async def lookup_toggles(self, request: Request) -> ProxyResult:
        if not self.gate.is_ready():
            return ProxyResult.not_ready()
        if not authorize(self._token(request), self.tokens.client_keys):
            return ProxyResult.unauthorized()

        try:
            body = LookupRequest.model_validate(await self._read_json(request))
        except (ValueError, pydantic.ValidationError) as exc:
            return ProxyResult.bad_request(ErrorResponse(
                code="INVALID_BODY",
                message="Expected a JSON object with optional 'context' and 'toggles'",
                details={"error": str(exc)},
            ))

        toggles = await self.client.get_defined_toggles(body.toggles or [], body.context or {})
        return ProxyResult.ok({"toggles": toggles})

    async def register_metrics(self, request: Request) -> ProxyResult:
        token = self._token(request)
        if not authorize(token, self.tokens.client_keys, self.tokens.server_side_tokens):
            return ProxyResult.unauthorized()

        try:
            data = await self._read_json(request)
        except ValueError as exc:
            error = MetricsValidationError("Metrics body is not valid JSON", details={"error": str(exc)})
        else:
            result = self.validator.validate(data)
            error = result.error

        if error is not None:
            self.logger.warning("Invalid metrics posted", error=error.message, details=error.details)
            return ProxyResult.bad_request(error.to_response())

        await self.client.register_metrics(result.value)
        return ProxyResult.ok_empty()

    async def get_feature_definitions(self, request: Request) -> ProxyResult:
        if not self.gate.is_ready():
            return ProxyResult.not_ready()
        if not authorize(self._token(request), self.tokens.server_side_tokens):
            return ProxyResult.unauthorized()

        features = await self.client.get_feature_toggle_definitions()
        return ProxyResult.ok(
            {"version": FEATURES_API_VERSION, "features": features},
            headers={"Cache-Control": self.cache_control},
        )
