"""
Domain logic for the Proxy Service.

Everything here is transport-agnostic apart from the controller, which reads
headers, query parameters and bodies from a Starlette request and answers
with a ``ProxyResult``.
"""

from .context import build_context
from .controller import ProxyController
from .readiness import ReadinessGate
from .results import ProxyResult, ResultKind, render_result
from .tokens import TokenRegistry, TokenSet, authorize

__all__ = [
    "build_context",
    "ProxyController",
    "ReadinessGate",
    "ProxyResult",
    "ResultKind",
    "render_result",
    "TokenRegistry",
    "TokenSet",
    "authorize",
]
