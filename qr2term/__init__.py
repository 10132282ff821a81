"""qr2term -- render QR codes and other square bitmaps in a terminal.

Each line of output packs two pixel rows into one row of character cells,
using a lower half block glyph and inverted colors so the code reads as a
solid, seamless image in ordinary terminal fonts.

Typical use:

    from qr2term import print_qr
    print_qr("https://example.com")
"""

from .errors import EncodingFailed, InvariantViolation, SinkWriteFailure
from .matrix import Color, Matrix
from .qr import QUIET_ZONE_WIDTH, Qr, QrcodeEncoder, build_matrix, generate_qr_string, print_qr
from .renderer import Renderer, compute_height, compute_width, render_to_stdout, render_to_text

__all__ = [
    "QUIET_ZONE_WIDTH",
    "Color",
    "EncodingFailed",
    "InvariantViolation",
    "Matrix",
    "Qr",
    "QrcodeEncoder",
    "Renderer",
    "SinkWriteFailure",
    "build_matrix",
    "compute_height",
    "compute_width",
    "generate_qr_string",
    "print_qr",
    "render_to_stdout",
    "render_to_text",
]
