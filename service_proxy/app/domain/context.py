"""
Evaluation context construction from request query parameters.
"""

from typing import Any, Dict, Mapping, Optional

REMOTE_ADDRESS = "remoteAddress"


def build_context(query: Mapping[str, Any], fallback_remote_address: Optional[str]) -> Dict[str, Any]:
    """Copy query parameters into a fresh context.

    ``remoteAddress`` from the query wins; when it is absent or empty the
    transport-level peer address is used. The input mapping is left untouched.
    """
    context: Dict[str, Any] = {key: query[key] for key in query.keys()}
    if not context.get(REMOTE_ADDRESS) and fallback_remote_address is not None:
        context[REMOTE_ADDRESS] = fallback_remote_address
    return context
