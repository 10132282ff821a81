"""Terminal text rendering for 2D barcodes.

Packs two pixel rows into one line of text. Every character cell shows the
upper pixel in its background color and the lower pixel in the foreground
color of a lower half block (U+2584):

- DARK over DARK:   " " white on black
- DARK over LIGHT:  "▄" white on black
- LIGHT over DARK:  "▄" black on white
- LIGHT over LIGHT: " " black on white

The naive approach would use full block, upper half block, lower half block
and space. Full block and upper half block render with a gap above them on
many terminal fonts, so stacking them leaves visible seams between lines.
The lower half block renders flush, so both the full and the upper glyphs
are synthesized from space and lower half block with inverted colors.

A matrix with an odd side has a last pixel row without a partner; its
missing lower pixels are treated as LIGHT.
"""

from __future__ import annotations

import io
import sys
from enum import Enum
from typing import Protocol, TextIO, runtime_checkable

import structlog
from colorama import Back, Fore, Style, just_fix_windows_console

from .errors import SinkWriteFailure
from .matrix import Color, Matrix
from .util import half_up

logger = structlog.get_logger(__name__)

LOWER_HALF_BLOCK = "▄"
EMPTY_CELL = " "


class TerminalColor(Enum):
    """Terminal colors requested from a styler."""

    BLACK = "black"
    WHITE = "white"


# (top, bottom) -> (glyph, foreground, background)
CELL_STYLES: dict[tuple[Color, Color], tuple[str, TerminalColor, TerminalColor]] = {
    (Color.DARK, Color.DARK): (EMPTY_CELL, TerminalColor.WHITE, TerminalColor.BLACK),
    (Color.DARK, Color.LIGHT): (LOWER_HALF_BLOCK, TerminalColor.WHITE, TerminalColor.BLACK),
    (Color.LIGHT, Color.DARK): (LOWER_HALF_BLOCK, TerminalColor.BLACK, TerminalColor.WHITE),
    (Color.LIGHT, Color.LIGHT): (EMPTY_CELL, TerminalColor.BLACK, TerminalColor.WHITE),
}


@runtime_checkable
class TextStyler(Protocol):
    """Wrap one glyph in the escape sequences for a foreground and background color."""

    def style(self, glyph: str, foreground: TerminalColor, background: TerminalColor, /) -> str:
        ...


class ColoramaStyler:
    """Wrap glyphs in ANSI SGR sequences using colorama.

    Each cell ends with a full reset, so the line feed after a row never
    inherits a background color.
    """

    _FOREGROUND = {TerminalColor.BLACK: Fore.BLACK, TerminalColor.WHITE: Fore.WHITE}
    _BACKGROUND = {TerminalColor.BLACK: Back.BLACK, TerminalColor.WHITE: Back.WHITE}

    def style(self, glyph: str, foreground: TerminalColor, background: TerminalColor, /) -> str:
        fg = self._FOREGROUND[foreground]
        bg = self._BACKGROUND[background]
        return f"{fg}{bg}{glyph}{Style.RESET_ALL}"


class Renderer:
    """QR barcode renderer intended for terminals.

    The renderer holds no per-call state, so one instance can render
    independent matrices to independent sinks from several threads.
    """

    def __init__(self, styler: TextStyler | None = None) -> None:
        self.styler = styler or ColoramaStyler()

    def width(self, matrix: Matrix[Color]) -> int:
        """Number of character columns ``render`` produces."""
        return matrix.size

    def height(self, matrix: Matrix[Color]) -> int:
        """Number of lines ``render`` produces."""
        return half_up(matrix.size)

    def render(self, matrix: Matrix[Color], target: TextIO) -> None:
        """Write the text representation of ``matrix`` to ``target``.

        One line is written per pair of pixel rows, each terminated by a
        single line feed.

        Raises:
            SinkWriteFailure: If ``target`` rejects a write.
        """
        rows = list(matrix.rows())
        blank = (Color.LIGHT,) * matrix.size

        for top_index in range(0, len(rows), 2):
            top = rows[top_index]
            bottom = rows[top_index + 1] if top_index + 1 < len(rows) else blank
            line = "".join(self._cell(upper, lower) for upper, lower in zip(top, bottom))
            try:
                target.write(line + "\n")
            except (OSError, ValueError) as e:
                raise SinkWriteFailure(f"Failed to write QR code: {e}") from e

        logger.debug("matrix_rendered", width=self.width(matrix), height=self.height(matrix))

    def print_stdout(self, matrix: Matrix[Color]) -> None:
        """Print a matrix describing a 2D barcode to the terminal.

        The text is always written as UTF-8, whatever encoding ``sys.stdout``
        was opened with, so half blocks survive legacy code pages.

        Raises:
            SinkWriteFailure: If standard output is closed or broken.
        """
        just_fix_windows_console()
        stream = sys.stdout
        binary = getattr(stream, "buffer", None)
        if binary is None:
            self.render(matrix, stream)
            _flush(stream)
            return

        # Text already queued on the stream goes out before the code
        _flush(stream)
        target = io.TextIOWrapper(binary, encoding="utf-8", newline="\n", write_through=True)
        try:
            self.render(matrix, target)
            _flush(target)
        finally:
            # Leave sys.stdout's buffer open when the wrapper is collected
            if not binary.closed:
                target.detach()

    def _cell(self, top: Color, bottom: Color) -> str:
        glyph, foreground, background = CELL_STYLES[(top, bottom)]
        return self.styler.style(glyph, foreground, background)


def _flush(stream: TextIO) -> None:
    try:
        stream.flush()
    except (OSError, ValueError) as e:
        raise SinkWriteFailure(f"Failed to print QR code to stdout: {e}") from e


_default_renderer = Renderer()


def compute_width(matrix: Matrix[Color]) -> int:
    """Character columns needed to render ``matrix``."""
    return _default_renderer.width(matrix)


def compute_height(matrix: Matrix[Color]) -> int:
    """Character rows needed to render ``matrix``."""
    return _default_renderer.height(matrix)


def render_to_text(matrix: Matrix[Color]) -> str:
    """Render ``matrix`` into a string of styled text."""
    buffer = io.StringIO()
    _default_renderer.render(matrix, buffer)
    return buffer.getvalue()


def render_to_stdout(matrix: Matrix[Color]) -> None:
    """Render ``matrix`` to standard output."""
    _default_renderer.print_stdout(matrix)
