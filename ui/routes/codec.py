"""Encoding, decoding and check-digit routes."""

from typing import Optional

from fastapi import APIRouter

from codec.alphabet import decode as decode_text, encode as encode_value
from core.errors import DecodeError

router = APIRouter(prefix="/api/v1/codec", tags=["codec"])

# Set by app.py
_check_digit = None


def init(generator):
    """Initialize with the check-digit engine of the app's generator."""
    global _check_digit
    _check_digit = generator.config.check_digit


@router.get("/encode")
async def encode(value: int, radix: int = 62, seed: Optional[int] = None, check_digit: bool = False):
    text = encode_value(value, radix, seed=seed)
    if check_digit:
        text = _check_digit.append(text, radix)
    return {"text": text, "radix": radix}


@router.get("/decode")
async def decode(text: str, radix: int = 62, seed: Optional[int] = None, check_digit: bool = False):
    if check_digit:
        stripped = _check_digit.strip(text, radix)
        if stripped is None:
            raise DecodeError("check digit does not match", text=text)
        text = stripped
    # str: values past 2**53 lose precision as JSON numbers in browsers
    return {"value": str(decode_text(text, radix, seed=seed)), "radix": radix}


@router.get("/verify")
async def verify(text: str, radix: int = 10):
    return {"valid": _check_digit.verify(text, radix)}
