"""Identifier errors with tracking IDs."""

from utils.timestamp import format_timestamp


class IdError(Exception):
    """Base error with unique ID and timestamp for tracking."""

    def __init__(self, message, context=None, cause=None):
        super().__init__(message)
        # generation.ksuid renders through the codec, which raises these errors
        from generation.ksuid import generate_ksuid

        self.error_id = generate_ksuid()
        self.timestamp = format_timestamp()
        self.context = context or {}
        self.cause = cause

    def __str__(self):
        return f"[{self.error_id}] {super().__str__()}"

    def to_dict(self):
        return {
            "error": type(self).__name__,
            "error_id": self.error_id,
            "timestamp": self.timestamp,
            "msg": self.args[0] if self.args else "",
            "context": self.context,
        }


class InvalidRadix(IdError):
    """Radix below 2 or larger than the alphabet it should index."""

    def __init__(self, message, radix=None, **kwargs):
        context = kwargs.pop("context", {})
        if radix is not None:
            context["radix"] = radix
        super().__init__(message, context=context, **kwargs)


class UnsupportedRadix(InvalidRadix):
    """No canonical alphabet covers the requested radix."""


class InvalidAlphabet(IdError):
    """Alphabet with repeated characters."""


class DecodeError(IdError, ValueError):
    """Text contains a character outside the target alphabet."""

    def __init__(self, message, text=None, position=None, **kwargs):
        context = kwargs.pop("context", {})
        if text is not None:
            context["text"] = text
        if position is not None:
            context["position"] = position
        super().__init__(message, context=context, **kwargs)


class InvalidArgument(IdError, ValueError):
    """Out-of-range input to a generator or codec (negative value, worker id, size)."""

    def __init__(self, message, field=None, value=None, **kwargs):
        context = kwargs.pop("context", {})
        if field:
            context["field"] = field
            context["value"] = value
        super().__init__(message, context=context, **kwargs)


class CheckDigitError(IdError):
    """A check-digit strategy returned something other than one character."""
