"""Text normalization: ordered substitutions followed by full-width folding."""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import AbstractSet, Iterable

from ..exceptions import NormalizeError

# FULLWIDTH EXCLAMATION MARK .. FULLWIDTH TILDE
FULLWIDTH_START = 0xFF01
FULLWIDTH_END = 0xFF5E
HALF_WIDTH_OFFSET = 0xFEE0
FULLWIDTH_PATTERN = "[！-～]"


@dataclass(frozen=True)
class Replacement:
    """A single substitution rule."""
    original: str
    replacement: str


@lru_cache(maxsize=None)
def _compile(pattern: str):
    try:
        return re.compile(pattern)
    except re.error as e:
        raise NormalizeError(f"Failed to create regex pattern {pattern!r}", e) from e


def is_fullwidth(char: str) -> bool:
    """Check if char lies in the folded full-width range"""
    return len(char) == 1 and FULLWIDTH_START <= ord(char) <= FULLWIDTH_END


def to_half_width(char: str) -> str:
    """Map a full-width character to its ASCII twin; other characters are returned as is."""
    if not is_fullwidth(char):
        return char
    return chr(ord(char) - HALF_WIDTH_OFFSET)


def apply_replacements(text: str, replacements: Iterable[Replacement]) -> str:
    """Apply each rule in order; later rules see the output of earlier ones."""
    for rule in replacements:
        if not rule.original:
            continue
        text = text.replace(rule.original, rule.replacement)
    return text


def fold_width(text: str, exclusions: AbstractSet[str] = frozenset()) -> str:
    """Fold U+FF01-U+FF5E to half-width, leaving excluded characters alone."""
    pattern = _compile(FULLWIDTH_PATTERN)

    def _fold(match):
        char = match.group(0)
        if char in exclusions:
            return char
        return to_half_width(char)

    return pattern.sub(_fold, text)


def normalize(
    text: str,
    replacements: Iterable[Replacement] = (),
    exclusions: AbstractSet[str] = frozenset(),
) -> str:
    """Run the substitutions and then width folding over text.

    Substitutions are applied sequentially, not simultaneously: when a rule's
    replacement contains a later rule's original, the later rule rewrites it
    again. Rule order in replacements.json is therefore significant.

    Raises:
        NormalizeError: the internal folding pattern failed to compile.
    """
    return fold_width(apply_replacements(text, replacements), exclusions)
