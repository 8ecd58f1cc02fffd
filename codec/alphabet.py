"""
Positional encoding of non-negative integers over character alphabets.

Digits are rendered most-significant first with no padding, so ``0`` encodes
to the alphabet's first character. The radix-32 and radix-62 tables list
their characters in ASCII order, which keeps encoded strings of equal length
sortable; the radix-64 and radix-94 tables append symbols after ``z`` and do
not.
"""

import random
import string
from functools import lru_cache

from core.errors import DecodeError, InvalidAlphabet, InvalidArgument, InvalidRadix, UnsupportedRadix

CHARS62 = string.digits + string.ascii_uppercase + string.ascii_lowercase
# Crockford-style: no I, L, O or U
CHARS32 = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
CHARS64 = CHARS62 + "-_"
CHARS94 = CHARS62 + string.punctuation

MIN_RADIX = 2
MAX_RADIX = len(CHARS94)


class Alphabet:
    """An ordered, duplicate-free character set; its length is the radix."""

    __slots__ = ("chars", "radix", "_index")

    def __init__(self, chars, radix=None):
        if radix is None:
            radix = len(chars)
        if radix < MIN_RADIX or radix > len(chars):
            raise InvalidRadix(f"radix {radix} needs 2 <= radix <= {len(chars)}", radix=radix)
        chars = chars[:radix]
        if len(set(chars)) != len(chars):
            raise InvalidAlphabet("alphabet repeats characters", context={"chars": chars})
        self.chars = chars
        self.radix = radix
        self._index = {char: value for value, char in enumerate(chars)}

    def __repr__(self):
        return f"Alphabet({self.chars!r})"

    def __eq__(self, other):
        return isinstance(other, Alphabet) and other.chars == self.chars

    def __hash__(self):
        return hash(self.chars)

    def __contains__(self, char):
        return char in self._index

    def shuffled(self, seed):
        """Same characters in a permutation fixed by ``seed``."""
        chars = list(self.chars)
        random.Random(seed).shuffle(chars)
        return Alphabet("".join(chars))

    def encode(self, value):
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise InvalidArgument("only non-negative integers can be encoded", field="value", value=value)

        chars = []
        while True:
            value, remainder = divmod(value, self.radix)
            chars.append(self.chars[remainder])
            if value == 0:
                break
        return "".join(reversed(chars))

    def decode(self, text):
        if not text:
            raise DecodeError("nothing to decode", text=text)

        value = 0
        for position, char in enumerate(text):
            digit = self._index.get(char)
            if digit is None:
                raise DecodeError(f"{char!r} is not in the alphabet", text=text, position=position)
            value = value * self.radix + digit
        return value


@lru_cache(maxsize=None)
def alphabet_for(radix):
    """Canonical alphabet for ``radix``."""
    if radix == 32:
        return Alphabet(CHARS32)
    if MIN_RADIX <= radix <= 62:
        return Alphabet(CHARS62, radix)
    if 62 < radix <= 64:
        return Alphabet(CHARS64, radix)
    if 64 < radix <= MAX_RADIX:
        return Alphabet(CHARS94, radix)
    raise UnsupportedRadix(f"radix must be between {MIN_RADIX} and {MAX_RADIX}, not {radix}", radix=radix)


def resolve(radix=None, alphabet=None, seed=None):
    """Pick the alphabet for a codec call.

    Without an explicit ``alphabet`` the policy of :func:`alphabet_for`
    applies (radix 62 when none is given). An explicit ``alphabet`` (string
    or :class:`Alphabet`) bypasses the policy and is cut to ``radix``
    characters when a radix is given. ``seed`` permutes whichever alphabet
    was chosen.
    """
    if alphabet is None:
        chosen = alphabet_for(62 if radix is None else radix)
    elif isinstance(alphabet, Alphabet):
        chosen = alphabet if radix in (None, alphabet.radix) else Alphabet(alphabet.chars, radix)
    else:
        chosen = Alphabet(alphabet, radix)

    if seed is not None:
        chosen = _shuffled(chosen, seed)
    return chosen


@lru_cache(maxsize=256)
def _shuffled(alphabet, seed):
    return alphabet.shuffled(seed)


def encode(value, radix=None, alphabet=None, seed=None):
    """Render ``value`` in ``radix``."""
    return resolve(radix, alphabet, seed).encode(value)


def decode(text, radix=None, alphabet=None, seed=None):
    """Parse ``text`` as a ``radix`` number. Raises :class:`DecodeError`."""
    return resolve(radix, alphabet, seed).decode(text)


def try_decode(text, radix=None, alphabet=None, seed=None):
    """Like :func:`decode` but returns ``None`` for malformed input."""
    try:
        return decode(text, radix, alphabet, seed)
    except DecodeError:
        return None
