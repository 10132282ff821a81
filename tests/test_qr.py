"""Tests for the QR encoding adapter and one-call helpers."""

import pytest
import qrcode.constants
import qrcode.exceptions
from structlog.testing import capture_logs

from qr2term.errors import EncodingFailed, InvariantViolation
from qr2term.matrix import Color, Matrix
from qr2term.qr import (
    ERROR_CORRECTION_LEVELS,
    QUIET_ZONE_WIDTH,
    Encoder,
    Qr,
    QrcodeEncoder,
    build_matrix,
    generate_qr_string,
    print_qr,
    select_error_correction,
)
from qr2term.renderer import compute_height, compute_width, render_to_text

TOO_LONG = "a" * 8000


class FixedEncoder:
    """Stand-in encoder returning a fixed cell list and recording its input."""

    def __init__(self, colors):
        self.colors = colors
        self.seen = []

    def encode(self, data):
        self.seen.append(data)
        return list(self.colors)


class RejectingEncoder:
    def encode(self, data):
        raise EncodingFailed("rejected")


class TestSelectErrorCorrection:
    def test_known_levels(self):
        assert select_error_correction("L") == qrcode.constants.ERROR_CORRECT_L
        assert select_error_correction("h") == qrcode.constants.ERROR_CORRECT_H

    def test_all_levels_listed(self):
        assert set(ERROR_CORRECTION_LEVELS) == {"L", "M", "Q", "H"}

    def test_unknown_raises(self):
        with pytest.raises(ValueError, match="Unknown error correction level"):
            select_error_correction("X")

    def test_encoder_rejects_unknown_level(self):
        with pytest.raises(ValueError):
            QrcodeEncoder("Z")


class TestQrcodeEncoder:
    def test_version_1_is_21_square(self):
        colors = QrcodeEncoder().encode(b"hello")
        assert len(colors) == 21 * 21
        assert set(colors) == {Color.DARK, Color.LIGHT}

    def test_no_border_starts_with_finder_pattern(self):
        matrix = Matrix(QrcodeEncoder().encode(b"hello"))
        # Outer ring of the top-left finder pattern is dark
        assert all(matrix[0, col] == Color.DARK for col in range(7))
        assert all(matrix[row, 0] == Color.DARK for row in range(7))
        assert matrix[1, 1] == Color.LIGHT

    def test_higher_level_grows_code(self):
        text = b"hello world, this is a longer string"
        low = QrcodeEncoder("L").encode(text)
        high = QrcodeEncoder("H").encode(text)
        assert len(high) > len(low)

    def test_too_long_raises(self):
        with pytest.raises(EncodingFailed, match="Cannot render QR code"):
            QrcodeEncoder().encode(TOO_LONG.encode())

    def test_failure_keeps_cause(self):
        with pytest.raises(EncodingFailed) as excinfo:
            QrcodeEncoder().encode(TOO_LONG.encode())
        overflow_errors = (qrcode.exceptions.DataOverflowError, ValueError)
        assert isinstance(excinfo.value.__cause__, overflow_errors)

    @pytest.mark.parametrize(
        "error",
        [
            qrcode.exceptions.DataOverflowError(),
            ValueError("Invalid version (was 41, expected 1 to 40)"),
        ],
    )
    def test_overflow_from_any_qrcode_release(self, monkeypatch, error):
        def overflow(self, fit=True):
            raise error

        monkeypatch.setattr(qrcode.QRCode, "make", overflow)
        with pytest.raises(EncodingFailed, match="Cannot render QR code") as excinfo:
            QrcodeEncoder().encode(b"hello")
        assert excinfo.value.__cause__ is error

    def test_capacity_depends_on_level(self):
        data = b"a" * 2500
        assert QrcodeEncoder("L").encode(data)
        with pytest.raises(EncodingFailed, match="level H"):
            QrcodeEncoder("H").encode(data)

    def test_logs_version(self):
        with capture_logs() as logs:
            QrcodeEncoder("Q").encode(b"hello")
        event = next(e for e in logs if e["event"] == "qr_encoded")
        assert event["version"] == 1
        assert event["size"] == 21
        assert event["error_correction"] == "Q"


class TestQr:
    def test_text_is_utf8(self):
        encoder = FixedEncoder([Color.DARK])
        Qr.from_data("héllo", encoder)
        assert encoder.seen == ["héllo".encode("utf-8")]

    def test_bytes_pass_through(self):
        encoder = FixedEncoder([Color.DARK])
        Qr.from_data(b"\x00\xff", encoder)
        assert encoder.seen == [b"\x00\xff"]

    def test_to_matrix(self):
        colors = [Color.DARK, Color.LIGHT, Color.LIGHT, Color.DARK]
        matrix = Qr.from_data("x", FixedEncoder(colors)).to_matrix()
        assert matrix.size == 2
        assert list(matrix.pixels) == colors

    def test_to_matrix_returns_fresh_matrix(self):
        qr = Qr.from_data("x", FixedEncoder([Color.DARK]))
        first = qr.to_matrix()
        first.surround(2, Color.LIGHT)
        assert qr.to_matrix().size == 1

    def test_malformed_encoder_output_is_invariant_violation(self):
        qr = Qr.from_data("x", FixedEncoder([Color.DARK] * 5))
        with pytest.raises(InvariantViolation):
            qr.to_matrix()

    def test_stand_ins_satisfy_protocol(self):
        assert isinstance(FixedEncoder([]), Encoder)
        assert isinstance(QrcodeEncoder(), Encoder)

    def test_encoder_failure_propagates(self):
        with pytest.raises(EncodingFailed, match="rejected"):
            Qr.from_data("x", RejectingEncoder())

    def test_default_encoder(self):
        assert Qr.from_data("hello").to_matrix().size == 21

    def test_too_long(self):
        with pytest.raises(EncodingFailed):
            Qr.from_data(TOO_LONG)


class TestBuildMatrix:
    def test_adds_light_quiet_zone(self):
        matrix = build_matrix("hello", quiet_zone=3, error_correction="L")
        assert matrix.size == 27
        assert all(matrix[row, col] == Color.LIGHT for row in range(3) for col in range(27))
        assert matrix[3, 3] == Color.DARK

    def test_negative_quiet_zone_raises(self):
        with pytest.raises(ValueError, match="non-negative"):
            build_matrix("hello", quiet_zone=-1)

    def test_too_long_raises(self):
        with pytest.raises(EncodingFailed):
            build_matrix(TOO_LONG)


class TestGenerateQrString:
    def test_default_quiet_zone(self):
        assert QUIET_ZONE_WIDTH == 2
        text = generate_qr_string("hello")
        lines = text.splitlines()
        assert len(lines) == 13
        matrix = Qr.from_data("hello").to_matrix()
        matrix.surround(QUIET_ZONE_WIDTH, Color.LIGHT)
        assert compute_width(matrix) == 25
        assert compute_height(matrix) == 13
        assert text == render_to_text(matrix)

    def test_custom_quiet_zone(self):
        assert len(generate_qr_string("hello", quiet_zone=0).splitlines()) == 11
        assert len(generate_qr_string("hello", quiet_zone=4).splitlines()) == 15

    def test_first_line_is_quiet(self):
        first = generate_qr_string("hello").splitlines()[0]
        assert "▄" not in first

    def test_too_long_raises(self):
        with pytest.raises(EncodingFailed):
            generate_qr_string(TOO_LONG)


class TestPrintQr:
    def test_prints_rendered_code(self, capsys):
        with capture_logs():
            print_qr("hello")
        assert capsys.readouterr().out == generate_qr_string("hello")

    def test_too_long_prints_nothing(self, capsys):
        with pytest.raises(EncodingFailed):
            print_qr(TOO_LONG)
        assert capsys.readouterr().out == ""
