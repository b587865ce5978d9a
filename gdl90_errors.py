"""
Exception types raised by the GDL-90 decoders
"""


class FormatError(ValueError):
    """Malformed, truncated or out-of-range bytes at some decode step"""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


class UnsupportedError(FormatError):
    """
    A wire feature that is known to exist but is not decoded.

    Subclass of FormatError so callers that only care about "this datagram
    could not be decoded" can catch a single type.
    """
