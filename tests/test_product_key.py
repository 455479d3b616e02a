"""
Tests for the Product Key Decoder

Covers:
    - Known decoding vectors
    - Key shape and alphabet
    - Purity (no mutation, deterministic)
    - Fallbacks for short, undecodable and missing blobs
"""

import random
import re
import pytest
from unittest.mock import patch

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src import product_key
from src.product_key import (
    KEY_ALPHABET,
    NO_KEY_MESSAGE,
    PARTIAL_KEY_PREFIX,
    decode_product_key,
    is_product_key,
)

KEY_SHAPE = re.compile(r"^[A-Z2-9]{5}-[A-Z2-9]{5}-[A-Z2-9]{5}-[A-Z2-9]{5}-[A-Z2-9]{5}$")


def blob_with_window(window_bytes):
    """Build a 164-byte blob whose key window starts with ``window_bytes``."""
    blob = bytearray(164)
    blob[52:52 + len(window_bytes)] = bytes(window_bytes)
    return bytes(blob)


class TestKnownVectors:
    """Hand-computed decodings."""

    def test_zero_window(self):
        """An all-zero key decodes to all B."""
        assert decode_product_key(bytes(164)) == "BBBBB-BBBBB-BBBBB-BBBBB-BBBBB"

    def test_single_low_digit(self):
        """Value 5 sets only the last character."""
        assert decode_product_key(blob_with_window([5])) == "BBBBB-BBBBB-BBBBB-BBBBB-BBBBH"

    def test_carry_into_second_digit(self):
        """Value 24 is '10' in base 24."""
        assert decode_product_key(blob_with_window([24])) == "BBBBB-BBBBB-BBBBB-BBBBB-BBBCB"

    def test_full_byte(self):
        """255 = 10 * 24 + 15."""
        assert decode_product_key(blob_with_window([255])) == "BBBBB-BBBBB-BBBBB-BBBBB-BBBQX"

    def test_little_endian_window(self):
        """Byte 53 is the 256s place: 256 = 10 * 24 + 16."""
        assert decode_product_key(blob_with_window([0, 1])) == "BBBBB-BBBBB-BBBBB-BBBBB-BBBQY"

    def test_bytes_outside_window_ignored(self, product_key_blob):
        """Only bytes 52..66 affect the key."""
        altered = bytearray(product_key_blob)
        altered[0:52] = b"\xff" * 52
        altered[67:] = b"\xaa" * (len(altered) - 67)
        assert decode_product_key(bytes(altered)) == decode_product_key(product_key_blob)


class TestKeyShape:
    """Structural properties of decoded keys."""

    def test_shape(self, product_key_blob):
        """Decoded key has five groups of five."""
        key = decode_product_key(product_key_blob)
        assert KEY_SHAPE.match(key)
        assert len(key) == 29

    def test_alphabet_only(self, product_key_blob):
        """Every character comes from the key alphabet."""
        key = decode_product_key(product_key_blob)
        assert set(key.replace("-", "")) <= set(KEY_ALPHABET)

    def test_random_blobs(self):
        """Arbitrary 67+ byte blobs always decode to a well-formed key."""
        rng = random.Random(1234)
        for _ in range(50):
            length = rng.randint(67, 200)
            blob = bytes(rng.randrange(256) for _ in range(length))
            key = decode_product_key(blob)
            assert KEY_SHAPE.match(key), key
            assert set(key.replace("-", "")) <= set(KEY_ALPHABET)

    def test_minimum_length(self):
        """A blob of exactly 67 bytes is decodable."""
        assert is_product_key(decode_product_key(bytes(67)))

    def test_is_product_key(self):
        """Partial and missing results are not keys."""
        assert is_product_key("BBBBB-BBBBB-BBBBB-BBBBB-BBBBB")
        assert not is_product_key(NO_KEY_MESSAGE)
        assert not is_product_key(PARTIAL_KEY_PREFIX + "00")


class TestPurity:
    """The decoder has no side effects."""

    def test_deterministic(self, product_key_blob):
        """Same input, same output."""
        assert decode_product_key(product_key_blob) == decode_product_key(product_key_blob)

    def test_input_not_mutated(self):
        """A mutable caller buffer is left as it was."""
        buffer = bytearray(blob_with_window([0x3E, 0x91, 0x07, 0xC4]))
        snapshot = bytes(buffer)
        decode_product_key(buffer)
        assert bytes(buffer) == snapshot


class TestFallbacks:
    """Missing and undecodable blobs."""

    def test_none(self):
        """No blob at all."""
        assert decode_product_key(None) == "No Windows Product Key found."

    def test_empty(self):
        """An empty registry value counts as missing."""
        assert decode_product_key(b"") == NO_KEY_MESSAGE

    def test_short_blob_partial(self):
        """A blob too short for the key window reports the bytes it has."""
        blob = bytes(range(60))
        result = decode_product_key(blob)
        assert result == PARTIAL_KEY_PREFIX + "3435363738393A3B"

    def test_decode_error_partial(self, product_key_blob):
        """An exception during decoding falls back to hex."""
        with patch.object(product_key, "_decode_key_window", side_effect=ValueError("bad")):
            result = decode_product_key(product_key_blob)

        expected_hex = product_key_blob[52:67].hex().upper()
        assert result == "Partial Product Key (hex): " + expected_hex

    def test_unknown_sentinel_partial(self, product_key_blob):
        """An 'Unknown' result is never reported as a key."""
        with patch.object(product_key, "_decode_key_window", return_value="Unknown"):
            result = decode_product_key(product_key_blob)

        assert result.startswith(PARTIAL_KEY_PREFIX)
        assert len(result) == len(PARTIAL_KEY_PREFIX) + 30
