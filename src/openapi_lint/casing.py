"""Identifier case-style detection and conversion."""

import re
from enum import Enum


class CaseStyle(str, Enum):
    PASCAL = "PascalCase"
    CAMEL = "camelCase"
    SNAKE = "snake_case"
    SCREAMING_SNAKE = "SCREAMING_SNAKE_CASE"
    KEBAB = "kebab-case"
    MIXED = "mixed"


STYLE_PATTERNS = {
    CaseStyle.SNAKE: re.compile(r"^[a-z0-9]+(?:_[a-z0-9]+)*$"),
    CaseStyle.KEBAB: re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$"),
    CaseStyle.SCREAMING_SNAKE: re.compile(r"^[A-Z0-9]+(?:_[A-Z0-9]+)*$"),
    CaseStyle.CAMEL: re.compile(r"^[a-z][a-zA-Z0-9]*$"),
    CaseStyle.PASCAL: re.compile(r"^[A-Z][a-zA-Z0-9]*$"),
}

# acronyms stay together ("HTTPServer" -> HTTP, Server); digits stick to the word before them
WORD_PATTERN = re.compile(r"[A-Z]+(?![a-z])[0-9]*|[A-Z]?[a-z]+[0-9]*|[0-9]+")
SEPARATORS = re.compile(r"[_\-\s.]+")


def classify_case(identifier: str) -> CaseStyle:
    """Detect the case style of an identifier.

    Single lowercase words match several styles at once; the first style in
    STYLE_PATTERNS order wins, so `name` reports as snake_case.
    """
    for style, pattern in STYLE_PATTERNS.items():
        if pattern.match(identifier):
            return style
    return CaseStyle.MIXED


def conforms(identifier: str, style: CaseStyle) -> bool:
    """Whether `identifier` is acceptable under `style`.

    A single word conforms to every style whose letter case it does not
    contradict: `id` passes snake_case, kebab-case and camelCase but not
    PascalCase.
    """
    if style is CaseStyle.MIXED:
        return False
    return bool(STYLE_PATTERNS[style].match(identifier))


def split_words(identifier: str) -> list[str]:
    words = []
    for chunk in SEPARATORS.split(identifier):
        words.extend(WORD_PATTERN.findall(chunk))
    return words


def convert_case(identifier: str, style: CaseStyle) -> str:
    """Best-effort respelling of `identifier` in `style`."""
    words = split_words(identifier)
    if not words or style is CaseStyle.MIXED:
        return identifier

    lower = [w.lower() for w in words]
    if style is CaseStyle.SNAKE:
        return "_".join(lower)
    if style is CaseStyle.KEBAB:
        return "-".join(lower)
    if style is CaseStyle.SCREAMING_SNAKE:
        return "_".join(w.upper() for w in words)
    if style is CaseStyle.CAMEL:
        return lower[0] + "".join(w.capitalize() for w in lower[1:])
    return "".join(w.capitalize() for w in lower)
