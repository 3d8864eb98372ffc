# coerce.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from .errors import InvalidBooleanLiteral

TRUE_WORDS = frozenset({"yes", "true"})
FALSE_WORDS = frozenset({"no", "false"})

RAILS_ENVIRONMENTS = ("development", "production", "test")

Classifier = Callable[[str], Optional[bool]]


@dataclass(frozen=True)
class Coercion:
    """Result of parsing a flag: its truth value and the choice it matched, if any."""
    value: bool
    matched: Optional[str] = None


def coerce_bool(raw: str, classifier: Classifier | None = None) -> bool:
    """
    'yes'/'true' -> True, 'no'/'false' -> False (case-insensitive).

    Anything else is handed to `classifier`. Its answer is accepted only if
    it is a real bool and a second call returns the same value.
    """
    word = raw.lower()
    if word in FALSE_WORDS:
        return False
    if word in TRUE_WORDS:
        return True

    if classifier is None:
        raise InvalidBooleanLiteral(input=raw)

    first = classifier(raw)
    if not isinstance(first, bool):
        raise InvalidBooleanLiteral(input=raw, reason="no classifier match")
    second = classifier(raw)
    if second is not first:
        raise InvalidBooleanLiteral(input=raw, reason="classifier is not idempotent")
    return first


def coerce_choice(raw: str, choices: Iterable[str]) -> Coercion:
    """
    Parse a tri-state flag: a boolean word, or one of `choices` (exact match),
    which counts as True and is reported back as `matched`.
    """
    table = frozenset(choices)

    def classify(s: str) -> Optional[bool]:
        return True if s in table else None

    value = coerce_bool(raw, classify)
    return Coercion(value=value, matched=raw if raw in table else None)


def env_flag(raw: str | None, default: str) -> bool:
    """Coerce an optional environment-style flag; unset or empty means `default`."""
    return coerce_bool(raw or default)


def config_flag(value: object) -> bool:
    """
    Truth value of a boolean config key. Recipes pass bools or 1/0;
    --set passes strings, which go through coerce_bool ('1'/'0' included).
    """
    if isinstance(value, str):
        stripped = value.strip()
        if stripped in ("1", "0"):
            return stripped == "1"
        return coerce_bool(stripped)
    return bool(value)
