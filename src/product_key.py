"""
Windows Product Key Decoder

Decodes the DigitalProductId blob stored under
HKLM\\SOFTWARE\\Microsoft\\Windows NT\\CurrentVersion into the familiar
five-group license key.

The key is a 15-byte little-endian integer at offset 52 of the blob. It is
written out in base 24 using an alphabet that leaves out visually ambiguous
characters, most significant digit first.
"""

import re
import logging
from typing import Optional

logger = logging.getLogger("sysinventory.product_key")

KEY_ALPHABET = "BCDFGHJKMPQRTVWXY2346789"
KEY_START = 52
KEY_END = 66  # inclusive
KEY_LENGTH = 25
GROUP_SIZE = 5

UNKNOWN_KEY = "Unknown"
NO_KEY_MESSAGE = "No Windows Product Key found."
PARTIAL_KEY_PREFIX = "Partial Product Key (hex): "

KEY_PATTERN = re.compile(r"^[A-Z2-9]{5}(-[A-Z2-9]{5}){4}$")


def _decode_key_window(window: bytes) -> str:
    """
    Run the base-256 to base-24 long division over a 15-byte window.

    Works on a private copy; ``window`` itself is never modified.
    """
    digits = bytearray(window)
    chars = []

    for i in range(KEY_LENGTH - 1, -1, -1):
        current = 0
        for j in range(len(digits) - 1, -1, -1):
            current = (current * 256) ^ digits[j]
            digits[j] = current // 24
            current %= 24

        chars.insert(0, KEY_ALPHABET[current])
        if i % GROUP_SIZE == 0 and i != 0:
            chars.insert(0, "-")

    return "".join(chars)


def _decode_raw(blob: bytes) -> str:
    if len(blob) <= KEY_END:
        return UNKNOWN_KEY
    return _decode_key_window(bytes(blob[KEY_START:KEY_END + 1]))


def partial_key(blob: bytes) -> str:
    """Hex dump of the key window, used when the key cannot be decoded."""
    window = blob[KEY_START:KEY_END + 1]
    return PARTIAL_KEY_PREFIX + "".join(f"{b:02X}" for b in window)


def decode_product_key(blob: Optional[bytes]) -> str:
    """
    Decode a DigitalProductId blob.

    Args:
        blob: Raw registry value, or None when the value is missing

    Returns:
        The key as XXXXX-XXXXX-XXXXX-XXXXX-XXXXX, a hex partial key when
        decoding fails, or NO_KEY_MESSAGE when there is no blob at all
    """
    if not blob:
        return NO_KEY_MESSAGE

    try:
        key = _decode_raw(blob)
    except (TypeError, ValueError, IndexError) as e:
        logger.warning(f"Product key decoding failed: {e}")
        return partial_key(blob)

    if UNKNOWN_KEY in key:
        logger.debug("Product key blob too short to decode")
        return partial_key(blob)

    return key


def is_product_key(value: str) -> bool:
    """Check whether ``value`` is a fully decoded key."""
    return bool(KEY_PATTERN.match(value or ""))
