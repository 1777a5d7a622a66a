"""Text normalization shared by catalog indexing and order resolution."""

import re

NEGATION_PREFIX = re.compile(r"^(?:no|without)\s+")
QUALIFIER_PREFIX = re.compile(r"^(?:extra|add|light|with)\s+")
BINDING_PREFIX = re.compile(r"^(?:extra|add|light|no|without|with)\s+")


def normalize(value: object) -> str:
    """Lowercase, trim and collapse internal whitespace.

    Non-string input is stringified and ``None`` becomes an empty string so
    malformed requests never raise here.
    """
    if value is None:
        return ""
    return " ".join(str(value).lower().split())


def strip_prefixes(phrase: str, pattern: re.Pattern[str]) -> str:
    """Repeatedly remove leading qualifiers matched by ``pattern``.

    "add extra cheese" -> "cheese". A phrase made only of qualifiers is
    returned unchanged rather than emptied.
    """
    current = phrase
    while True:
        stripped = pattern.sub("", current, count=1)
        if stripped == current or not stripped:
            return current
        current = stripped


def base_word(phrase: str) -> str:
    """Base word of a modifier phrase with intensity/relation qualifiers removed."""
    return strip_prefixes(normalize(phrase), QUALIFIER_PREFIX)


def binding_base_word(name: str) -> str:
    """Base word used when indexing a catalog modifier name."""
    return strip_prefixes(normalize(name), BINDING_PREFIX)


def negation_target(phrase: str) -> str | None:
    """Target of a negated phrase ("no onions" -> "onions"), None if not negated."""
    normalized = normalize(phrase)
    match = NEGATION_PREFIX.match(normalized)
    if not match:
        return None
    target = normalized[match.end():]
    return target or None
