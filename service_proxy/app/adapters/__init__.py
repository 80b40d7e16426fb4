"""
Adapters package for the Proxy Service.

The proxy never evaluates toggles itself. It talks to an evaluation client
through the ``EvaluationClient`` interface; ``StaticEvaluationClient`` serves
definitions from a bootstrap file for local runs and tests.
"""

from .evaluation_client import EvaluationClient, ToggleStatus, Variant
from .static_client import StaticEvaluationClient

__all__ = [
    "EvaluationClient",
    "ToggleStatus",
    "Variant",
    "StaticEvaluationClient",
]
