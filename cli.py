"""
Command line front end for the Huffman codec

How to run:
  huffzip compress notes.txt                 # writes notes.txt.huf
  huffzip compress notes.txt -o compressed.bin
  huffzip decompress notes.txt.huf -o notes.out.txt
  huffzip info notes.txt.huf
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import codec
from huffman import HuffmanError

SUFFIX = ".huf"


def default_output(src: Path, mode: str) -> Path:
    if mode == "compress":
        return src.with_name(src.name + SUFFIX)
    if src.suffix == SUFFIX:
        return src.with_suffix("")
    return src.with_name(src.name + ".out")


def print_stats(stats: codec.CompressionStats) -> None:
    print(f"  original size    {stats.original_bytes} bytes")
    print(f"  compressed size  {stats.compressed_bytes} bytes")
    print(f"  ratio            {stats.compression_ratio:.3f} ({stats.space_saved_percent:+.1f}% saved)")
    print(f"  unique symbols   {stats.unique_symbols}")
    print(f"  payload bits     {stats.bit_length} (+{stats.pad_bits} padding)")


def run_compress(args) -> None:
    src = Path(args.input)
    dst = Path(args.output) if args.output else default_output(src, "compress")
    blob = codec.compress(src.read_bytes())
    dst.write_bytes(blob)
    print(f"{src} -> {dst}")
    print_stats(codec.compression_stats(blob))


def run_decompress(args) -> None:
    src = Path(args.input)
    dst = Path(args.output) if args.output else default_output(src, "decompress")
    data = codec.decompress(src.read_bytes())
    dst.write_bytes(data)
    print(f"{src} -> {dst} ({len(data)} bytes)")


def run_info(args) -> None:
    src = Path(args.input)
    print(src)
    print_stats(codec.compression_stats(src.read_bytes()))


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="huffzip", description="Huffman compress and decompress files")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("compress", help="Compress a file into a self-contained artifact")
    p.add_argument("input", type=str, help="File to compress")
    p.add_argument("-o", "--output", type=str, default=None, help=f"Output path (default: INPUT{SUFFIX})")
    p.set_defaults(func=run_compress)

    p = sub.add_parser("decompress", help="Restore the original bytes from an artifact")
    p.add_argument("input", type=str, help="Artifact to decompress")
    p.add_argument("-o", "--output", type=str, default=None, help=f"Output path (default: INPUT without {SUFFIX})")
    p.set_defaults(func=run_decompress)

    p = sub.add_parser("info", help="Show the header of an artifact")
    p.add_argument("input", type=str, help="Artifact to inspect")
    p.set_defaults(func=run_info)

    args = ap.parse_args(argv)
    try:
        args.func(args)
    except (HuffmanError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
