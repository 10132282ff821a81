#!/usr/bin/env python3
"""Basic usage example for qr2term.

Renders a few QR codes straight to the terminal, including a WiFi
network code that phones can scan to join a network.

Usage:
    python examples/basic_usage.py
"""

import logging
import os
import sys

import structlog

# Add parent directory to path for direct script execution
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from qr2term.errors import EncodingFailed
from qr2term.matrix import Color, Matrix
from qr2term.qr import Qr, QrcodeEncoder, print_qr
from qr2term.renderer import compute_height, compute_width, render_to_stdout

structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(logging.INFO))


def example_print_url():
    """Print a URL as QR code with the default quiet zone."""
    print("=" * 60)
    print("Example 1: URL")
    print("=" * 60)

    print_qr("https://example.com")
    print()


def example_wifi():
    """Ask for WiFi credentials and print the network as QR code."""
    print("=" * 60)
    print("Example 2: WiFi network")
    print("=" * 60)

    network = input("WiFi network name: ")
    password = input("Password: ")
    network_type = input("Type (WEP or [WPA - hit Enter as default]): ") or "WPA"

    print_qr(f"WIFI:S:{network};T:{network_type};P:{password};;")
    print()


def example_manual_pipeline():
    """Encode, pad and render step by step."""
    print("=" * 60)
    print("Example 3: Manual pipeline with a wide quiet zone")
    print("=" * 60)

    matrix = Qr.from_data("hello", QrcodeEncoder("H")).to_matrix()
    matrix.surround(4, Color.LIGHT)
    print(f"  Size: {compute_width(matrix)} columns x {compute_height(matrix)} lines")
    render_to_stdout(matrix)
    print()


def example_checkerboard():
    """Render a bitmap that did not come from a QR encoder."""
    print("=" * 60)
    print("Example 4: Checkerboard bitmap")
    print("=" * 60)

    side = 8
    pixels = [
        Color.DARK if (row + col) % 2 else Color.LIGHT
        for row in range(side)
        for col in range(side)
    ]
    render_to_stdout(Matrix(pixels))
    print()


def example_too_long():
    """Show the error for data beyond QR capacity."""
    print("=" * 60)
    print("Example 5: Data too long")
    print("=" * 60)

    try:
        print_qr("a" * 8000)
    except EncodingFailed as e:
        print(f"  Error: {e}")
    print()


if __name__ == "__main__":
    example_print_url()
    example_manual_pipeline()
    example_checkerboard()
    example_too_long()
    if sys.stdin.isatty():
        example_wifi()
    print("All examples completed successfully.")
