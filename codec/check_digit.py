"""
Check digits: one trailing character derived from the rest of an id.

The default strategy renders ``crc32(id) % radix`` as a single digit of the
canonical alphabet for ``radix``. It catches most transcription errors
(a single changed character slips through with probability about
``1/radix``); it is not a cryptographic signature.
"""

import re
import zlib

from codec.alphabet import alphabet_for
from core.errors import CheckDigitError

_AMBIGUOUS = str.maketrans({"O": "0", "I": "1", "L": "1"})
_SEPARATORS = re.compile(r"[\s-]+")


def crc32_check_digit(id, radix):
    """Default check-digit strategy."""
    return alphabet_for(radix).chars[zlib.crc32(id.encode("utf-8")) % radix]


class CheckDigit:
    """Computes, appends and verifies check digits with a pluggable strategy.

    ``strategy`` is any callable ``(id, radix) -> str`` returning exactly one
    character; it defaults to :func:`crc32_check_digit`.
    """

    __slots__ = ("strategy",)

    def __init__(self, strategy=None):
        self.strategy = strategy or crc32_check_digit

    def compute(self, id, radix=10):
        id = str(id)
        digit = self.strategy(id, radix)
        if not isinstance(digit, str) or len(digit) != 1:
            raise CheckDigitError("check-digit strategy must return one character",
                                  context={"strategy": getattr(self.strategy, "__name__", repr(self.strategy)),
                                           "returned": repr(digit)})
        return digit

    def append(self, id, radix=10):
        id = str(id)
        return id + self.compute(id, radix)

    def verify(self, id_with_digit, radix=10):
        """True when the last character matches the rest. Mismatch is not an error."""
        if not id_with_digit:
            return False
        return id_with_digit == self.append(id_with_digit[:-1], radix)

    def strip(self, id_with_digit, radix=10):
        """The id without its check digit, or ``None`` when it does not verify."""
        if self.verify(id_with_digit, radix):
            return id_with_digit[:-1]
        return None


DEFAULT = CheckDigit()


def compute_check_digit(id, radix=10):
    return DEFAULT.compute(id, radix)


def append_check_digit(id, radix=10):
    return DEFAULT.append(id, radix)


def valid_check_digit(id_with_digit, radix=10):
    return DEFAULT.verify(id_with_digit, radix)


def normalize_code(text):
    """Canonical form of a hand-typed radix-32 code.

    Upper-cases, drops spaces and hyphens, and folds the characters the
    radix-32 alphabet leaves out onto the digits they resemble
    (``O`` to ``0``; ``I`` and ``L`` to ``1``).
    """
    return _SEPARATORS.sub("", text).upper().translate(_AMBIGUOUS)
