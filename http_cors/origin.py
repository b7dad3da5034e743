"""Origin admission policy and resolution.

A configured origin policy compiles into one of the variants below:

- ``AnyOrigin``: unset or ``"*"``; the response echoes the wildcard.
- ``FixedOrigin``: a single string; the response always carries that string.
- matchers (``Exact``, ``Pattern``, ``Predicate``, ``AnyOf``): the request's
  own origin is echoed back when the matcher accepts it.

Resolution is a recursive match over the variant. ``AnyOf`` keeps the
first-match-wins order of the configured sequence.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple, Union

from http_cors.errors import CorsConfigError

WILDCARD = "*"


@dataclass(frozen=True)
class AnyOrigin:
    def resolve(self, request_origin: Optional[str]) -> Optional[str]:
        return WILDCARD


@dataclass(frozen=True)
class FixedOrigin:
    value: str

    def resolve(self, request_origin: Optional[str]) -> Optional[str]:
        return self.value


class _Matcher:
    """Base for variants that echo the request origin when they match."""

    def matches(self, request_origin: str) -> bool:  # pragma: no cover - abstract
        raise NotImplementedError

    def resolve(self, request_origin: Optional[str]) -> Optional[str]:
        if request_origin is not None and self.matches(request_origin):
            return request_origin
        return None


@dataclass(frozen=True)
class Exact(_Matcher):
    value: str

    def matches(self, request_origin: str) -> bool:
        return self.value == request_origin


@dataclass(frozen=True)
class Pattern(_Matcher):
    # search() rather than fullmatch(): anchors belong in the pattern
    regex: re.Pattern[str]

    def matches(self, request_origin: str) -> bool:
        return self.regex.search(request_origin) is not None


@dataclass(frozen=True)
class Predicate(_Matcher):
    func: Callable[[str], Any]

    def matches(self, request_origin: str) -> bool:
        return bool(self.func(request_origin))


@dataclass(frozen=True)
class AnyOf(_Matcher):
    matchers: Tuple[_Matcher, ...]

    def matches(self, request_origin: str) -> bool:
        return any(m.matches(request_origin) for m in self.matchers)


OriginPolicy = Union[AnyOrigin, FixedOrigin, Exact, Pattern, Predicate, AnyOf]


def _compile_matcher(value: Any) -> _Matcher:
    if isinstance(value, _Matcher):
        return value
    if isinstance(value, str):
        return Exact(value)
    if isinstance(value, re.Pattern):
        return Pattern(value)
    if isinstance(value, (list, tuple)):
        return AnyOf(tuple(_compile_matcher(v) for v in value))
    if callable(value):
        return Predicate(value)
    raise CorsConfigError(
        f"unsupported origin policy element {value!r} ({type(value).__name__}); "
        "expected a string, compiled regex, callable or a sequence of those"
    )


def compile_policy(value: Any) -> OriginPolicy:
    """Compile a user-supplied origin policy into its variant form.

    Raises:
        CorsConfigError: when the policy (or one of its elements) is not a
            string, compiled regular expression, callable or sequence.
    """
    if isinstance(value, (AnyOrigin, FixedOrigin)):
        return value
    if value is None or value == WILDCARD:
        return AnyOrigin()
    if isinstance(value, str):
        return FixedOrigin(value)
    return _compile_matcher(value)  # type: ignore[return-value]


def resolve_origin(request_origin: Optional[str], policy: Any) -> Optional[str]:
    """Return the ``Access-Control-Allow-Origin`` value for a request origin.

    ``None`` means the origin is not admitted.
    """
    return compile_policy(policy).resolve(request_origin)


__all__ = [
    "WILDCARD",
    "AnyOrigin",
    "FixedOrigin",
    "Exact",
    "Pattern",
    "Predicate",
    "AnyOf",
    "OriginPolicy",
    "compile_policy",
    "resolve_origin",
]
