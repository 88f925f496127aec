"""
Share Recovery :: Base Decoder
===============================

Decodes a share value written as a numeral in radix 2..36 into an exact
Python ``int``.

ALGORITHM:
  Horner's method over the numeral, most significant digit first:

    acc = 0
    for each character c:
        acc = acc * base + digit(c)

  Python integers are unbounded, so no precision is lost however many
  digits the share value has.

DIGITS:
  ``0-9`` then ``a-z`` (case-insensitive); a character's position in
  ``ALPHABET`` is its digit value.
"""

from typing import Optional

from .errors import InvalidBase, InvalidDigit


ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
MIN_BASE = 2
MAX_BASE = len(ALPHABET)

_DIGIT_VALUES = {ch: i for i, ch in enumerate(ALPHABET)}


def digit_value(character: str, base: int) -> int:
    """Value of a single numeral character in *base*; raises InvalidDigit."""
    value = _DIGIT_VALUES.get(character.lower(), -1)
    if value == -1 or value >= base:
        raise InvalidDigit(character, base)
    return value


def decode(digits: str, base: int, identifier: Optional[str] = None) -> int:
    """
    Decode *digits* as a big-endian numeral in *base*.

    >>> decode("111", 2)
    7
    >>> decode("aed7", 16)
    44759

    *identifier* only labels the share in error messages.
    """
    if isinstance(base, bool) or not isinstance(base, int) or not MIN_BASE <= base <= MAX_BASE:
        raise InvalidBase(base, identifier)
    if not digits:
        raise InvalidDigit("", base, identifier)

    result = 0
    for character in digits:
        try:
            result = result * base + digit_value(character, base)
        except InvalidDigit:
            raise InvalidDigit(character, base, identifier) from None
    return result
