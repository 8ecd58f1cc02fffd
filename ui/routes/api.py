"""API routes for generator statistics."""

from fastapi import APIRouter, Depends

from utils.timestamp import format_timestamp
from ui.auth import verify_basic_auth

router = APIRouter(prefix="/api/v1", tags=["api"])

# Set by app.py
_generator = None


def init(generator):
    """Initialize with the generator reference."""
    global _generator
    _generator = generator


@router.get("/stats")
async def stats(username=Depends(verify_basic_auth)):
    """Issue counts, sequence wraps and clock regressions (requires basic auth)."""
    return {
        "timestamp": format_timestamp(),
        "generator": _generator.stats(),
    }
