"""
compress / decompress entry points

Symbols are always bytes: text is encoded before compression and decoded
after decompression, never counted as code points.
"""

from __future__ import annotations

from dataclasses import dataclass

import artifact
import bitpack
import huffman
from huffman import CorruptDataError, EmptyInputError


def _as_bytes(data) -> bytes:
    if isinstance(data, str):
        raise TypeError("compress() takes bytes; use compress_text() for str")
    return bytes(data)


def build_code_table(data: bytes) -> dict:
    """Frequency table -> tree -> canonical code table for ``data``."""
    ft = huffman.build_frequency_table(data)
    root = huffman.build_huffman_tree(ft)
    code_map = huffman.generate_huffman_codes(root)
    return huffman.canonical_codes(huffman.code_lengths(code_map))


def compress(data) -> bytes:
    data = _as_bytes(data)
    if not data:
        raise EmptyInputError("cannot compress empty input")

    code_map = build_code_table(data)
    payload, bit_length = bitpack.pack_bits_from_codes(data, code_map)
    return artifact.encode_artifact(code_map, len(data), bit_length, payload)


def decompress(blob, use_tree: bool = True) -> bytes:
    parsed = artifact.decode_artifact(blob)
    if use_tree:
        table_or_tree = huffman.build_decoding_tree(parsed.code_map)
    else:
        table_or_tree = parsed.code_map
    decoded = bitpack.unpack(parsed.payload, parsed.bit_length, table_or_tree)

    if len(decoded) != parsed.symbol_count:
        raise CorruptDataError(
            f"decoded {len(decoded)} symbols but the artifact declares {parsed.symbol_count}"
        )
    return decoded


def compress_text(text: str, encoding: str = "utf-8") -> bytes:
    return compress(text.encode(encoding))


def decompress_text(blob, encoding: str = "utf-8") -> str:
    return decompress(blob).decode(encoding)


@dataclass
class CompressionStats:
    original_bytes: int
    compressed_bytes: int
    unique_symbols: int
    bit_length: int
    pad_bits: int

    @property
    def compression_ratio(self) -> float: # compressed / original, below 1.0 means it shrank
        return self.compressed_bytes / max(1, self.original_bytes)

    @property
    def space_saved_percent(self) -> float:
        return (1.0 - self.compression_ratio) * 100.0


def compression_stats(blob) -> CompressionStats:
    parsed = artifact.decode_artifact(blob)
    return CompressionStats(
        original_bytes=parsed.symbol_count,
        compressed_bytes=len(blob),
        unique_symbols=len(parsed.code_map),
        bit_length=parsed.bit_length,
        pad_bits=bitpack.padding_bits(parsed.bit_length),
    )
