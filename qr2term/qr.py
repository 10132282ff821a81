"""QR encoding adapter.

Turns arbitrary input data into a ``Matrix[Color]`` using the ``qrcode``
library, and offers the one-call helpers that encode, add the quiet zone
and render in one go.

Encoding steps:
1. Convert text input to UTF-8 bytes
2. Let the encoder pick the smallest QR version that fits
3. Map each module to DARK or LIGHT (no border, row-major)
4. Wrap the flat cell list in a Matrix

The quiet zone is added afterwards by ``Matrix.surround`` so callers can
choose its thickness independently of the encoder.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import qrcode
import qrcode.constants
import qrcode.exceptions
import structlog

from .errors import EncodingFailed
from .matrix import Color, Matrix
from .renderer import Renderer, render_to_text

logger = structlog.get_logger(__name__)

# The QR standard asks for 4, but 2 scans fine and keeps the output compact.
# (see https://qrworld.wordpress.com/2011/08/09/the-quiet-zone/)
QUIET_ZONE_WIDTH = 2

DEFAULT_ERROR_CORRECTION = "M"

ERROR_CORRECTION_LEVELS: dict[str, int] = {
    "L": qrcode.constants.ERROR_CORRECT_L,
    "M": qrcode.constants.ERROR_CORRECT_M,
    "Q": qrcode.constants.ERROR_CORRECT_Q,
    "H": qrcode.constants.ERROR_CORRECT_H,
}


def select_error_correction(name: str) -> int:
    """Select a qrcode error-correction constant by level name.

    Args:
        name: Level name (L, M, Q, H), case insensitive.

    Returns:
        The matching ``qrcode.constants`` value.

    Raises:
        ValueError: If name is not a known level.
    """
    level = ERROR_CORRECTION_LEVELS.get(name.upper())
    if level is None:
        valid = ", ".join(ERROR_CORRECTION_LEVELS.keys())
        raise ValueError(f"Unknown error correction level '{name}'. Valid levels: {valid}")
    return level


@runtime_checkable
class Encoder(Protocol):
    """Turn bytes into a flat, row-major list of module colors without a border."""

    def encode(self, data: bytes, /) -> list[Color]:
        ...


class QrcodeEncoder:
    """Encode bytes as QR code modules with the ``qrcode`` library."""

    def __init__(self, error_correction: str = DEFAULT_ERROR_CORRECTION) -> None:
        self.error_correction = error_correction.upper()
        self._level = select_error_correction(error_correction)

    def encode(self, data: bytes, /) -> list[Color]:
        code = qrcode.QRCode(error_correction=self._level, border=0)
        code.add_data(data)
        try:
            code.make(fit=True)
        # Older qrcode releases raise DataOverflowError, newer ones fail setting version 41
        except (qrcode.exceptions.DataOverflowError, ValueError) as e:
            raise EncodingFailed(
                f"Cannot render QR code: {len(data)} bytes exceed the capacity "
                f"at error correction level {self.error_correction}"
            ) from e

        modules = code.get_matrix()
        logger.debug(
            "qr_encoded",
            version=code.version,
            size=len(modules),
            error_correction=self.error_correction,
        )
        return [Color.DARK if module else Color.LIGHT for row in modules for module in row]


class Qr:
    """Raw QR code."""

    def __init__(self, colors: list[Color]) -> None:
        self._colors = colors

    @classmethod
    def from_data(cls, data: str | bytes, encoder: Encoder | None = None) -> Qr:
        """Construct a new QR code.

        Raises:
            EncodingFailed: If the encoder rejects the data.
        """
        raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        return cls((encoder or QrcodeEncoder()).encode(raw))

    def to_matrix(self) -> Matrix[Color]:
        """Create pixel matrix from this QR code."""
        return Matrix(self._colors)


def build_matrix(
    data: str | bytes,
    quiet_zone: int = QUIET_ZONE_WIDTH,
    error_correction: str = DEFAULT_ERROR_CORRECTION,
) -> Matrix[Color]:
    """Encode data and surround it with a light quiet zone.

    Raises:
        EncodingFailed: If the data does not fit in a QR code.
        ValueError: If quiet_zone is negative or the level is unknown.
    """
    matrix = Qr.from_data(data, QrcodeEncoder(error_correction)).to_matrix()
    matrix.surround(quiet_zone, Color.LIGHT)
    return matrix


def print_qr(
    data: str | bytes,
    quiet_zone: int = QUIET_ZONE_WIDTH,
    error_correction: str = DEFAULT_ERROR_CORRECTION,
) -> None:
    """Print the given data as QR code in the terminal.

    Raises:
        EncodingFailed: If the data does not fit in a QR code.
        SinkWriteFailure: If standard output is broken.
    """
    Renderer().print_stdout(build_matrix(data, quiet_zone, error_correction))


def generate_qr_string(
    data: str | bytes,
    quiet_zone: int = QUIET_ZONE_WIDTH,
    error_correction: str = DEFAULT_ERROR_CORRECTION,
) -> str:
    """Generate the terminal text for the given data as QR code.

    Raises:
        EncodingFailed: If the data does not fit in a QR code.
    """
    return render_to_text(build_matrix(data, quiet_zone, error_correction))
