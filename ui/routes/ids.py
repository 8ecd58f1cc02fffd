"""Id issuing routes."""

from typing import Literal, Optional

from fastapi import APIRouter

from generation.snowflake import SequenceMethod

router = APIRouter(prefix="/api/v1/ids", tags=["ids"])

# Set by app.py
_generator = None


def init(generator):
    """Initialize with the generator serving this app."""
    global _generator
    _generator = generator


@router.get("/snowflake")
async def snowflake(radix: int = 10, worker_id: Optional[int] = None,
                    sequence: SequenceMethod = SequenceMethod.COUNTER, check_digit: bool = False):
    """New snowflake. Always returned as a string; 63-bit ints overflow JS numbers."""
    value = _generator.snowflake(worker_id, radix, sequence, check_digit)
    return {"id": str(value), "radix": radix}


@router.get("/snowflake/{value}")
async def parse_snowflake(value: str, radix: int = 10, check_digit: bool = False):
    """Fields of an issued snowflake."""
    parts = _generator.parse_snowflake(value, radix, check_digit)
    return {
        **parts._asdict(),
        "issued_at": _generator.snowflakes.timestamp_of(parts).isoformat(),
    }


@router.get("/event")
async def event(size: int = 12, check_digit: bool = False):
    return {"id": _generator.event_id(size, check_digit)}


@router.get("/request")
async def request(sequence: SequenceMethod = SequenceMethod.COUNTER):
    request_id = _generator.request_id(sequence_method=sequence)
    return {"id": request_id, "short": _generator.short_request_id(request_id)}


@router.get("/nano")
async def nano(size: int = 20, radix: int = 62, check_digit: bool = True):
    return {"id": _generator.nano_id(size, radix, check_digit)}


@router.get("/code")
async def code(size: int = 8):
    return {"code": _generator.code(size)}


@router.get("/code/verify")
async def verify_code(text: str):
    """Normalised code if its check digit holds."""
    normalized = _generator.verify_code(text)
    return {"code": normalized, "valid": normalized is not None}


@router.get("/uuid")
async def uuid(kind: Literal["v4", "datetime", "epoch"] = "v4"):
    if kind == "datetime":
        return {"id": _generator.datetime_uuid()}
    if kind == "epoch":
        return {"id": _generator.epoch_uuid(application_epoch=True)}
    return {"id": _generator.uuid()}


@router.get("/ksuid")
async def ksuid():
    return {"id": _generator.ksuid()}
