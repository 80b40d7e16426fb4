"""
Shared utilities for the Feature Proxy.

This package aggregates common building blocks consumed by the proxy service:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- base_service: FastAPI application shell with middleware and error handlers

Any cross-cutting logic should live here. Do not import from service_*
packages into shared/.
"""
