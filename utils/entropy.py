"""Cryptographically secure randomness, backed by :mod:`secrets`."""

import secrets


def randbelow(n):
    """Uniform integer in ``[0, n)``."""
    return secrets.randbelow(n)


def token_bytes(nbytes=16):
    return secrets.token_bytes(nbytes)


def token_hex(nbytes=16):
    return secrets.token_hex(nbytes)


def random_string(size, chars):
    """``size`` characters drawn uniformly from ``chars``."""
    return "".join(secrets.choice(chars) for _ in range(size))
