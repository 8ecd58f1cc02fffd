"""Random string and integer ids, optionally with a check digit."""

from codec.alphabet import alphabet_for, encode
from codec.check_digit import DEFAULT, normalize_code
from core.errors import InvalidArgument
from utils.entropy import randbelow, random_string as _random_chars

CODE_RADIX = 32


def _positive(value, field):
    if value < 1:
        raise InvalidArgument(f"{field} must be positive", field=field, value=value)
    return value


def random_string(size=16, radix=62):
    """``size`` secure random characters of the canonical alphabet for ``radix``."""
    return _random_chars(_positive(size, "size"), alphabet_for(radix).chars)


def random_id(nbytes=8, radix=10, check_digit=False, checker=DEFAULT):
    """Random integer in ``[1, 2**(8*nbytes))``, rendered when ``radix`` is not 10."""
    value = randbelow((1 << (8 * _positive(nbytes, "nbytes"))) - 1) + 1
    if radix == 10 and not check_digit:
        return value
    text = str(value) if radix == 10 else encode(value, radix)
    return checker.append(text, radix) if check_digit else text


def nano_id(size=20, radix=62, check_digit=True, checker=DEFAULT):
    """URL-friendly random id; the check digit, when on, is part of ``size``."""
    if not check_digit:
        return random_string(size, radix)
    return checker.append(random_string(_positive(size - 1, "size"), radix), radix)


def code(size=8, check_digit=True, checker=DEFAULT):
    """Radix-32 code for people to read out or type in."""
    return nano_id(size, CODE_RADIX, check_digit, checker)


def verify_code(text, checker=DEFAULT):
    """Normalised code when its check digit holds, else ``None``."""
    normalized = normalize_code(text)
    return normalized if checker.verify(normalized, CODE_RADIX) else None
