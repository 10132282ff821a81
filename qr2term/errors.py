"""Exception types raised by qr2term.

Three failure kinds cross the public API:

- EncodingFailed: the barcode encoder rejected the input (usually because it
  exceeds the capacity of the largest QR version at the configured
  error-correction level). Callers may retry with shorter input or a lower
  level.
- InvariantViolation: a pixel sequence is not square. This only happens on a
  programming error upstream and is never caught inside the library.
- SinkWriteFailure: the output stream rejected a write. Not retried.
"""

from __future__ import annotations


class EncodingFailed(ValueError):
    """The external encoder could not turn the input into a barcode."""


class InvariantViolation(AssertionError):
    """A matrix-shaped value is not a perfect square."""


class SinkWriteFailure(OSError):
    """Writing rendered text to the output sink failed."""
