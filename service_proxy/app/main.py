"""
Feature Proxy service.
"""

from typing import Awaitable, Callable, List, Optional

from fastapi import Request

from shared.base_service import BaseService
from shared.config import ProxyConfig
from shared.logging import get_logger

from .adapters.evaluation_client import EvaluationClient
from .adapters.static_client import StaticEvaluationClient
from .domain.controller import ProxyController
from .domain.readiness import ReadinessGate
from .domain.results import ProxyResult, ResultKind, render_result
from .domain.tokens import TokenRegistry, TokenSource
from .validation.metrics_schema import MetricsSchemaValidator


class ProxyService(BaseService):
    """Proxy service implementation."""

    def __init__(self, config: Optional[ProxyConfig] = None, client: Optional[EvaluationClient] = None):
        super().__init__("proxy", 3000, config=config)
        self.tokens = TokenRegistry(
            self.config.client_key_list,
            self.config.server_side_token_list,
        )
        if not self.tokens.client_keys:
            self.logger.warning("No client keys configured, toggle endpoints will reject every request")

        self.client = client or StaticEvaluationClient(bootstrap_file=self.config.bootstrap_file)
        self.validator = MetricsSchemaValidator()

        self.readiness = ReadinessGate(logger=get_logger("proxy.readiness"))
        self.readiness.add_listener(lambda: self.metrics.set_gauge("proxy_ready", 1))

        self.controller = ProxyController(
            self.client,
            self.tokens,
            header_name=self.config.client_keys_header_name,
            validator=self.validator,
            gate=self.readiness,
            logger=get_logger("proxy.controller"),
            cache_max_age=self.config.cache_max_age_seconds,
        )

        @self.app.on_event("startup")
        async def _startup():
            await self.client.start()

        @self.app.on_event("shutdown")
        async def _shutdown():
            await self.client.close()

        self._setup_proxy_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.proxy_service = self

    def _route_paths(self, path: str) -> List[str]:
        """Paths for a route under the configured base path.

        The root route answers both with and without a trailing slash.
        """
        prefix = self.config.proxy_base_path.rstrip("/")
        if path == "/":
            return [prefix, prefix + "/"] if prefix else ["/"]
        return [prefix + path]

    def _respond(self, endpoint: str, result: ProxyResult):
        self.metrics.record_proxy_response(endpoint, result.kind.value)
        return render_result(result)

    def _setup_proxy_routes(self):
        """Set up proxy routes."""

        def add_route(path: str, method: str, endpoint: str,
                      handler: Callable[[Request], Awaitable[ProxyResult]]):
            async def route(request: Request):
                return self._respond(endpoint, await handler(request))

            route.__name__ = endpoint.replace("/", "_").strip("_") or "root"
            for index, full_path in enumerate(self._route_paths(path)):
                self.app.add_api_route(
                    full_path,
                    route,
                    methods=[method],
                    include_in_schema=index == 0,
                )

        async def health(request: Request) -> ProxyResult:
            result = await self.controller.health()
            self.metrics.record_health_check("ok" if result.kind is ResultKind.OK else "not_ready")
            return result

        async def register_metrics(request: Request) -> ProxyResult:
            result = await self.controller.register_metrics(request)
            self.metrics.increment_counter("client_metrics_received_total", outcome=result.kind.value)
            return result

        add_route("/health", "GET", "health", health)
        add_route("/", "GET", "get_enabled_toggles", self.controller.get_enabled_toggles)
        add_route("/", "POST", "lookup_toggles", self.controller.lookup_toggles)
        add_route("/client/metrics", "POST", "client_metrics", register_metrics)
        add_route("/client/features", "GET", "client_features", self.controller.get_feature_definitions)

    def set_client_keys(self, client_keys: TokenSource) -> None:
        """Replace the accepted client keys without restarting."""
        self.controller.set_client_keys(client_keys)
        self.logger.info("Client keys replaced", key_count=len(self.tokens.client_keys))

    # kept for backward compatibility
    def set_proxy_secrets(self, client_keys: TokenSource) -> None:
        self.set_client_keys(client_keys)

    def set_server_side_tokens(self, server_side_tokens: TokenSource) -> None:
        self.tokens.set_server_side_tokens(server_side_tokens)
        self.logger.info("Server-side tokens replaced", token_count=len(self.tokens.server_side_tokens))


def create_app(config: Optional[ProxyConfig] = None, client: Optional[EvaluationClient] = None):
    """Create FastAPI application."""
    service = ProxyService(config=config, client=client)
    return service.app


if __name__ == "__main__":
    service = ProxyService()
    service.run()
