"""
Token sets and the authorization rule for the Proxy Service.
"""

import threading
from typing import Iterable, Iterator, List, Optional, Union

from shared.config import parse_token_list


class TokenSet:
    """Immutable, ordered collection of opaque tokens."""

    __slots__ = ("_tokens", "_members")

    def __init__(self, tokens: Iterable[str] = ()):
        self._tokens = tuple(tokens)
        self._members = frozenset(self._tokens)

    @classmethod
    def from_string(cls, value: Optional[str]) -> "TokenSet":
        return cls(parse_token_list(value))

    def __contains__(self, token: object) -> bool:
        return isinstance(token, str) and token in self._members

    def __iter__(self) -> Iterator[str]:
        return iter(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TokenSet):
            return self._tokens == other._tokens
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._tokens)

    def __repr__(self) -> str:
        return f"TokenSet(size={len(self._tokens)})"

    def as_list(self) -> List[str]:
        return list(self._tokens)


TokenSource = Union[TokenSet, Iterable[str]]


def _as_token_set(tokens: TokenSource) -> TokenSet:
    if isinstance(tokens, TokenSet):
        return tokens
    if isinstance(tokens, str):
        return TokenSet.from_string(tokens)
    return TokenSet(tokens)


def authorize(token: Optional[str], *token_sets: TokenSet) -> bool:
    """True iff a token was presented and it is a member of any of the sets.

    Comparison is exact string equality.
    """
    if not token:
        return False
    return any(token in token_set for token_set in token_sets)


class TokenRegistry:
    """Current client keys and server-side tokens.

    Replacement swaps the whole ``TokenSet`` reference, so a reader sees either
    the previous set or the new one. Request handlers only read.
    """

    def __init__(self, client_keys: TokenSource = (), server_side_tokens: TokenSource = ()):
        self._write_lock = threading.Lock()
        self._client_keys = _as_token_set(client_keys)
        self._server_side_tokens = _as_token_set(server_side_tokens)

    @property
    def client_keys(self) -> TokenSet:
        return self._client_keys

    @property
    def server_side_tokens(self) -> TokenSet:
        return self._server_side_tokens

    def set_client_keys(self, client_keys: TokenSource) -> None:
        new_keys = _as_token_set(client_keys)
        with self._write_lock:
            self._client_keys = new_keys

    # kept for backward compatibility
    def set_proxy_secrets(self, client_keys: TokenSource) -> None:
        self.set_client_keys(client_keys)

    def set_server_side_tokens(self, server_side_tokens: TokenSource) -> None:
        new_tokens = _as_token_set(server_side_tokens)
        with self._write_lock:
            self._server_side_tokens = new_tokens
