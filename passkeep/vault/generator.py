"""
Random password generation from selectable character classes.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional
import secrets
import string

# Length bounds applied by callers before generating
MIN_LENGTH = 4
MAX_LENGTH = 128
DEFAULT_LENGTH = 16

SYMBOLS = "!@#$%^&*()_+[]{}|;:,.<>?/`~"


class InvalidLengthError(ValueError):
    """Requested password length is not a positive integer."""
    pass


class CharClass(Enum):
    """Character classes, in pool composition order."""
    LOWER = "lower"
    UPPER = "upper"
    DIGIT = "digit"
    SYMBOL = "symbol"

    @property
    def chars(self) -> str:
        return _CLASS_CHARS[self]

    @classmethod
    def parse(cls, name: str) -> CharClass:
        """Look up a class by name, accepting common plural spellings."""
        key = name.strip().lower()
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ValueError(
                f"Unknown character class {name!r} "
                f"(expected one of: {', '.join(c.value for c in cls)})"
            ) from None


_CLASS_CHARS = {
    CharClass.LOWER: string.ascii_lowercase,
    CharClass.UPPER: string.ascii_uppercase,
    CharClass.DIGIT: string.digits,
    CharClass.SYMBOL: SYMBOLS,
}

_ALIASES = {
    "lowercase": "lower",
    "uppercase": "upper",
    "digits": "digit",
    "numbers": "digit",
    "symbols": "symbol",
}


@dataclass
class GeneratorOptions:
    """Requested length and character classes."""
    length: int = DEFAULT_LENGTH
    classes: frozenset = field(default_factory=frozenset)

    def __post_init__(self):
        self.classes = frozenset(
            c if isinstance(c, CharClass) else CharClass.parse(c)
            for c in self.classes
        )

    def generate(self) -> str:
        return generate_password(self.length, self.classes)


def clamp_length(length: int) -> int:
    """Clamp length into [MIN_LENGTH, MAX_LENGTH]."""
    return min(max(length, MIN_LENGTH), MAX_LENGTH)


def parse_length(raw: Optional[str], default: int = DEFAULT_LENGTH) -> int:
    """
    Turn raw user input into a usable length.

    Anything that is not a positive integer falls back to default;
    the result is always clamped.
    """
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        value = 0
    if value <= 0:
        value = default
    return clamp_length(value)


def compose_pool(classes: Iterable[CharClass] = None) -> str:
    """
    Concatenate the characters of the selected classes.

    Order is always lower, upper, digit, symbol. An empty selection
    means every class.
    """
    selected = {
        c if isinstance(c, CharClass) else CharClass.parse(c)
        for c in (classes or ())
    }
    if not selected:
        selected = set(CharClass)
    return "".join(c.chars for c in CharClass if c in selected)


def generate_password(length: int, classes: Iterable[CharClass] = None) -> str:
    """
    Generate a random password.

    Each character is drawn independently and uniformly from the
    composed pool using the `secrets` module.

    Args:
        length: Number of characters (not clamped here)
        classes: Character classes to draw from; empty or None means all

    Returns:
        Password of exactly `length` characters

    Raises:
        InvalidLengthError: length is not a positive integer
    """
    if isinstance(length, bool) or not isinstance(length, int) or length <= 0:
        raise InvalidLengthError(f"Password length must be a positive integer, got {length!r}")

    pool = compose_pool(classes)
    return "".join(secrets.choice(pool) for _ in range(length))
