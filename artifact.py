"""
Self-describing compressed artifact

Layout (big-endian):
  magic         4s   b"HUFZ"
  version       B    1
  symbol_count  Q    length of the original input
  bit_length    Q    payload length in bits, padding excluded
  entry_count   H    number of distinct symbols (1..256)
  entries       B B  (symbol, code length) per distinct symbol
  payload            exactly ceil(bit_length / 8) bytes

Only code lengths are stored; the codes themselves are rebuilt canonically,
so decoding needs nothing besides these bytes.
"""

from __future__ import annotations

import struct
from typing import Dict, NamedTuple

from huffman import MalformedArtifactError, canonical_codes, code_lengths

MAGIC = b"HUFZ"
VERSION = 1
HEADER = struct.Struct(">4sBQQH")
ENTRY = struct.Struct(">BB")
MAX_SYMBOLS = 256


class Artifact(NamedTuple):
    code_map: Dict[int, str]
    symbol_count: int
    bit_length: int
    payload: bytes


def payload_size(bit_length: int) -> int:
    return (bit_length + 7) // 8


def encode_artifact(code_map: Dict[int, str], symbol_count: int, bit_length: int, payload: bytes) -> bytes:
    lengths = code_lengths(code_map)
    if canonical_codes(lengths) != code_map:
        raise ValueError("artifact tables must hold canonical codes")
    if not 0 < len(lengths) <= MAX_SYMBOLS:
        raise ValueError(f"artifact tables hold 1..{MAX_SYMBOLS} symbols, got {len(lengths)}")
    if len(payload) != payload_size(bit_length):
        raise ValueError(f"payload of {len(payload)} bytes does not hold exactly {bit_length} bits")

    out = bytearray(HEADER.pack(MAGIC, VERSION, symbol_count, bit_length, len(lengths)))
    for symbol in sorted(lengths):
        out += ENTRY.pack(symbol, lengths[symbol])
    out += payload
    return bytes(out)


def decode_artifact(blob: bytes) -> Artifact:
    blob = bytes(blob)
    if len(blob) < HEADER.size:
        raise MalformedArtifactError(f"artifact is {len(blob)} bytes, shorter than the {HEADER.size}-byte header")

    magic, version, symbol_count, bit_length, entry_count = HEADER.unpack_from(blob, 0)
    if magic != MAGIC:
        raise MalformedArtifactError(f"bad magic {magic!r}")
    if version != VERSION:
        raise MalformedArtifactError(f"unsupported artifact version {version}")
    if symbol_count == 0 or bit_length == 0:
        raise MalformedArtifactError("artifact declares an empty input")
    if not 0 < entry_count <= MAX_SYMBOLS:
        raise MalformedArtifactError(f"artifact declares {entry_count} symbols")

    cursor = HEADER.size
    if cursor + entry_count * ENTRY.size > len(blob):
        raise MalformedArtifactError("code table runs past the end of the artifact")

    lengths = {}
    for symbol, length in ENTRY.iter_unpack(blob[cursor:cursor + entry_count * ENTRY.size]):
        if symbol in lengths:
            raise MalformedArtifactError(f"symbol {symbol} listed twice")
        if length == 0:
            raise MalformedArtifactError(f"symbol {symbol} has a zero code length")
        lengths[symbol] = length
    cursor += entry_count * ENTRY.size

    # Kraft inequality: sum of 2**-length must not exceed 1 for a prefix code
    max_len = max(lengths.values())
    if sum(1 << (max_len - length) for length in lengths.values()) > (1 << max_len):
        raise MalformedArtifactError("code lengths do not form a prefix code")

    payload = blob[cursor:]
    if len(payload) != payload_size(bit_length):
        raise MalformedArtifactError(
            f"payload is {len(payload)} bytes but {bit_length} bits need {payload_size(bit_length)}"
        )
    min_len = min(lengths.values())
    if not symbol_count * min_len <= bit_length <= symbol_count * max_len:
        raise MalformedArtifactError(
            f"{bit_length} bits cannot hold {symbol_count} symbols with code lengths {min_len}..{max_len}"
        )

    return Artifact(canonical_codes(lengths), symbol_count, bit_length, payload)
