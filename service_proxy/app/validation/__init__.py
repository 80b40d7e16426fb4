"""
Request payload validation for the Proxy Service.
"""

from .metrics_schema import ClientMetrics, MetricsSchemaValidator, ValidationResult

__all__ = [
    "ClientMetrics",
    "MetricsSchemaValidator",
    "ValidationResult",
]
