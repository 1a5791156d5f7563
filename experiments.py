"""
Benchmark: tree-walk vs table-lookup decoding of huffzip artifacts

Every run compresses a synthetic dataset into a full artifact, decodes it back
with one of the two decoders, and records timings, sizes and correctness

Outputs (in --outdir):
  - metrics.csv     (raw row per run per pipeline)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts, skipped with --no_plots)

How to run:
  python experiments.py --outdir results --runs 5
  python experiments.py --outdir results --runs 3 --exp1_size_kb 256 --exp2_max_mb 2
  python experiments.py --outdir results --exp1_generators uniform256,zipf128,single_symbol
"""

from __future__ import annotations

import argparse
import csv
import random
import statistics
import time
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Callable, Dict, List, Tuple

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

import artifact
import bitpack
import codec
import huffman

PIPELINES = ("tree_walk", "table_lookup")


# Utilities

def now_ns() -> int:
    return time.perf_counter_ns()

def ns_to_ms(ns: int) -> float:
    return ns / 1_000_000.0

def safe_mkdir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


# Synthetic dataset generators

def _sample_cdf(rng: random.Random, weights: List[float], size: int) -> List[int]:
    total = sum(weights)
    cdf = []
    acc = 0.0
    for w in weights:
        acc += w / total
        cdf.append(acc)

    picks = []
    for _ in range(size):
        r = rng.random()
        lo, hi = 0, len(cdf) - 1
        while lo < hi:
            mid = (lo + hi) // 2
            if r <= cdf[mid]:
                hi = mid
            else:
                lo = mid + 1
        picks.append(lo)
    return picks

def gen_uniform(size: int, alphabet: int = 256, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    return bytes(rng.randrange(0, alphabet) for _ in range(size))

def gen_repetitive(size: int, dominant: int = ord('A'), dom_frac: float = 0.90, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    other_symbols = [i for i in range(256) if i != dominant]
    return bytes(dominant if rng.random() < dom_frac else rng.choice(other_symbols) for _ in range(size))

def gen_zipf_like(size: int, alphabet: int = 128, s: float = 1.2, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    weights = [1.0 / ((i + 1) ** s) for i in range(alphabet)]
    return bytes(_sample_cdf(rng, weights, size))

def gen_english_like(size: int, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    chars = (
        " etaoinshrdlcumwfgypbvkjxq"
        "ETAOINSHRDLCUMWFGYPBVKJXQ"
        "\n"
    )
    weights = []
    for ch in chars:
        if ch == ' ':
            weights.append(13.0)
        elif ch == '\n':
            weights.append(1.5)
        elif ch.lower() in "etaoinshrdlu":
            weights.append(6.0)
        elif ch.lower() in "cmfwgypbvk":
            weights.append(2.5)
        else:
            weights.append(1.2)
    return bytes(ord(chars[i]) for i in _sample_cdf(rng, weights, size))

def gen_single_symbol(size: int, symbol: int = ord('A')) -> bytes:
    return bytes([symbol]) * size

GENERATOR_REGISTRY: Dict[str, Callable[[int, int], bytes]] = {
    "uniform256": lambda size, seed: gen_uniform(size, alphabet=256, seed=seed),
    "uniform128": lambda size, seed: gen_uniform(size, alphabet=128, seed=seed),
    "zipf128": lambda size, seed: gen_zipf_like(size, alphabet=128, s=1.2, seed=seed),
    "zipf64": lambda size, seed: gen_zipf_like(size, alphabet=64, s=1.2, seed=seed),
    "repetitive90": lambda size, seed: gen_repetitive(size, dominant=ord('A'), dom_frac=0.90, seed=seed),
    "repetitive99": lambda size, seed: gen_repetitive(size, dominant=ord('A'), dom_frac=0.99, seed=seed),
    "english_like": lambda size, seed: gen_english_like(size, seed=seed),
    "single_symbol": lambda size, seed: gen_single_symbol(size),
}

def generate_dataset(name: str, size_bytes: int, seed: int) -> Tuple[str, bytes]:
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        raise ValueError(f"unknown generator {name!r}, choose from {', '.join(sorted(GENERATOR_REGISTRY))}")
    return name, fn(max(1, size_bytes), seed)


# Experiment runner

@dataclass
class MetricRow:
    exp_name: str
    dataset_name: str
    file_size_bytes: int
    run_id: int
    pipeline: str  # "tree_walk" or "table_lookup"
    unique_symbols: int

    build_codes_ms: float
    encode_ms: float
    decode_ms: float
    total_ms: float

    artifact_bytes: int
    header_bytes: int
    bit_length: int
    pad_bits: int
    compression_ratio: float

    correctness_ok: int  # 1 or 0


def run_one(data: bytes, pipeline: str) -> MetricRow:
    if pipeline not in PIPELINES:
        raise ValueError(f"pipeline must be one of {PIPELINES}")

    # code table build
    t0 = now_ns()
    code_map = codec.build_code_table(data)
    t1 = now_ns()
    build_codes_ms = ns_to_ms(t1 - t0)

    # encode: pack + artifact
    t2 = now_ns()
    payload, bit_length = bitpack.pack_bits_from_codes(data, code_map)
    blob = artifact.encode_artifact(code_map, len(data), bit_length, payload)
    t3 = now_ns()
    encode_ms = ns_to_ms(t3 - t2)

    # decode from the artifact bytes alone
    t4 = now_ns()
    try:
        decoded = codec.decompress(blob, use_tree=(pipeline == "tree_walk"))
    except huffman.HuffmanError as exc:
        print(f"[warn] {pipeline} failed to decode its own artifact: {exc}")
        decoded = None
    t5 = now_ns()
    decode_ms = ns_to_ms(t5 - t4)

    return MetricRow(
        exp_name="",
        dataset_name="",
        file_size_bytes=len(data),
        run_id=0,
        pipeline=pipeline,
        unique_symbols=len(code_map),
        build_codes_ms=build_codes_ms,
        encode_ms=encode_ms,
        decode_ms=decode_ms,
        total_ms=build_codes_ms + encode_ms + decode_ms,
        artifact_bytes=len(blob),
        header_bytes=len(blob) - len(payload),
        bit_length=bit_length,
        pad_bits=bitpack.padding_bits(bit_length),
        compression_ratio=len(blob) / max(1, len(data)),
        correctness_ok=1 if decoded == data else 0,
    )


def write_csv(path: Path, rows: List[MetricRow]) -> None:
    names = [f.name for f in fields(MetricRow)]
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=names)
        w.writeheader()
        for r in rows:
            w.writerow({k: getattr(r, k) for k in names})


SUMMARY_METRICS = ("compression_ratio", "build_codes_ms", "encode_ms", "decode_ms", "total_ms")

def mean_stdev(vals: List[float]) -> Tuple[float, float]:
    if len(vals) == 1:
        return vals[0], 0.0
    return statistics.mean(vals), statistics.stdev(vals)

def group_summary(rows: List[MetricRow], out_path: Path) -> None:
    """
    Group by exp_name, dataset_name, file_size_bytes, pipeline and compute mean/stdev
    """
    key_to: Dict[Tuple[str, str, int, str], List[MetricRow]] = {}
    for r in rows:
        key = (r.exp_name, r.dataset_name, r.file_size_bytes, r.pipeline)
        key_to.setdefault(key, []).append(r)

    summary_fields = ["exp_name", "dataset_name", "file_size_bytes", "pipeline", "n_runs"]
    for m in SUMMARY_METRICS:
        summary_fields += [f"{m}_mean", f"{m}_stdev"]
    summary_fields.append("correctness_ok_rate")

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        for key, items in sorted(key_to.items()):
            exp_name, dataset_name, size_b, pipeline = key
            row = {
                "exp_name": exp_name,
                "dataset_name": dataset_name,
                "file_size_bytes": size_b,
                "pipeline": pipeline,
                "n_runs": len(items),
                "correctness_ok_rate": sum(x.correctness_ok for x in items) / len(items),
            }
            for m in SUMMARY_METRICS:
                row[f"{m}_mean"], row[f"{m}_stdev"] = mean_stdev([getattr(x, m) for x in items])
            w.writerow(row)



# Plotting

def _line_chart(x, series: Dict[str, List[float]], xlabel: str, ylabel: str, title: str,
                out: Path, xticks: List[str] = None) -> None:
    plt.figure()
    for label, y in series.items():
        plt.plot(x, y, marker="o", label=label)
    if xticks is not None:
        plt.xticks(x, xticks, rotation=20, ha="right")
    if xlabel:
        plt.xlabel(xlabel)
    plt.ylabel(ylabel)
    plt.title(title)
    if len(series) > 1:
        plt.legend()
    plt.tight_layout()
    plt.savefig(out, dpi=200)
    plt.close()


def plot_experiment_1(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp1_distribution"]
    if not exp_rows:
        return

    datasets = sorted(set(r.dataset_name for r in exp_rows))

    def mean_for(dataset: str, pipeline: str, field: str) -> float:
        vals = [getattr(r, field) for r in exp_rows if r.dataset_name == dataset and r.pipeline == pipeline]
        return statistics.mean(vals) if vals else float("nan")

    x = list(range(len(datasets)))
    _line_chart(
        x, {"artifact": [mean_for(d, "tree_walk", "compression_ratio") for d in datasets]},
        "", "Artifact Bytes / Original Bytes", "Experiment 1: Compression Ratio by Distribution",
        outdir / "exp1_compression_ratio.png", xticks=datasets,
    )
    _line_chart(
        x, {p: [mean_for(d, p, "decode_ms") for d in datasets] for p in PIPELINES},
        "", "Decode Time (ms)", "Experiment 1: Decode Time by Distribution",
        outdir / "exp1_decode_time.png", xticks=datasets,
    )
    _line_chart(
        x, {p: [mean_for(d, p, "total_ms") for d in datasets] for p in PIPELINES},
        "", "Total Time (ms) (build + encode + decode)", "Experiment 1: Total Runtime by Distribution",
        outdir / "exp1_total_time.png", xticks=datasets,
    )


def plot_experiment_2(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp2_size_scaling"]
    if not exp_rows:
        return

    for dist in sorted(set(r.dataset_name for r in exp_rows)):
        dist_rows = [r for r in exp_rows if r.dataset_name == dist]
        sizes = sorted(set(r.file_size_bytes for r in dist_rows))

        def mean_size(size: int, pipeline: str, field: str) -> float:
            vals = [getattr(r, field) for r in dist_rows if r.file_size_bytes == size and r.pipeline == pipeline]
            return statistics.mean(vals) if vals else float("nan")

        _line_chart(
            sizes, {p: [mean_size(s, p, "decode_ms") for s in sizes] for p in PIPELINES},
            "File Size (bytes)", "Decode Time (ms)", f"Experiment 2: Decode Time vs Size ({dist})",
            outdir / f"exp2_decode_time_{dist}.png",
        )
        _line_chart(
            sizes, {"artifact": [mean_size(s, "tree_walk", "compression_ratio") for s in sizes]},
            "File Size (bytes)", "Artifact Bytes / Original Bytes",
            f"Experiment 2: Compression Ratio vs Size ({dist})",
            outdir / f"exp2_compression_ratio_{dist}.png",
        )
        _line_chart(
            sizes, {"encode": [mean_size(s, "tree_walk", "encode_ms") for s in sizes]},
            "File Size (bytes)", "Encode Time (ms)", f"Experiment 2: Encode Time vs Size ({dist})",
            outdir / f"exp2_encode_time_{dist}.png",
        )


def plot_experiment_3(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp3_pipeline_compare"]
    if not exp_rows:
        return

    datasets = sorted(set(r.dataset_name for r in exp_rows))

    def mean_total(dataset: str, pipeline: str) -> float:
        vals = [r.total_ms for r in exp_rows if r.dataset_name == dataset and r.pipeline == pipeline]
        return statistics.mean(vals) if vals else float("nan")

    _line_chart(
        list(range(len(datasets))), {p: [mean_total(d, p) for d in datasets] for p in PIPELINES},
        "", "Total Time (ms) (build + encode + decode)", "Experiment 3: End-to-End Time by Dataset",
        outdir / "exp3_total_time.png", xticks=datasets,
    )



# Main

def parse_csv_list(s: str) -> List[str]:
    return [x.strip() for x in s.split(",") if x.strip()]

def run_experiment(rows: List[MetricRow], exp_name: str, gen_name: str, size_b: int,
                   runs: int, seed: int, label: str = None) -> None:
    for run_id in range(1, runs + 1):
        dataset_name, data = generate_dataset(gen_name, size_b, seed + run_id)
        for pipeline in PIPELINES:
            row = run_one(data, pipeline)
            row.exp_name = exp_name
            row.dataset_name = label or dataset_name
            row.run_id = run_id
            rows.append(row)

def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--outdir", type=str, default="results", help="Output directory for CSV and plots")
    ap.add_argument("--runs", type=int, default=5, help="Repetitions per configuration (>=3 recommended for timing)")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")
    ap.add_argument("--no_plots", action="store_true", help="Only write the CSV files")

    # Experiment toggles
    ap.add_argument("--no_exp1", action="store_true", help="Disable experiment 1 (distribution)")
    ap.add_argument("--no_exp2", action="store_true", help="Disable experiment 2 (size scaling)")
    ap.add_argument("--no_exp3", action="store_true", help="Disable experiment 3 (pipeline compare)")

    # Experiment 1 controls
    ap.add_argument("--exp1_size_kb", type=int, default=512, help="Experiment 1 fixed file size in KB")
    ap.add_argument("--exp1_generators", type=str, default="uniform256,zipf128,repetitive90,english_like,single_symbol",
                    help="Comma-separated dataset generator names for experiment 1")

    # Experiment 2 controls
    ap.add_argument("--exp2_min_kb", type=int, default=4, help="Experiment 2 min size in KB (power-of-two growth)")
    ap.add_argument("--exp2_max_mb", type=int, default=8, help="Experiment 2 max size in MB (power-of-two growth)")
    ap.add_argument("--exp2_generators", type=str, default="uniform256,zipf128,repetitive90",
                    help="Comma-separated dataset generator names for experiment 2")

    args = ap.parse_args()

    for name in parse_csv_list(args.exp1_generators) + parse_csv_list(args.exp2_generators):
        if name not in GENERATOR_REGISTRY:
            ap.error(f"unknown generator {name!r}, choose from {', '.join(sorted(GENERATOR_REGISTRY))}")

    outdir = Path(args.outdir)
    safe_mkdir(outdir)

    rows: List[MetricRow] = []

    # Experiment 1: distributions (fixed size)
    if not args.no_exp1:
        fixed_size = max(1, args.exp1_size_kb) * 1024
        for gen_name in parse_csv_list(args.exp1_generators):
            print(f"[exp1] {gen_name} {fixed_size} bytes")
            run_experiment(rows, "exp1_distribution", gen_name, fixed_size, args.runs, args.seed)

    # Experiment 2: size scaling (multiple sizes, powers of 2)
    if not args.no_exp2:
        min_bytes = max(1, args.exp2_min_kb) * 1024
        max_bytes = max(1, args.exp2_max_mb) * 1024 * 1024

        sizes: List[int] = []
        s = min_bytes
        while s <= max_bytes:
            sizes.append(s)
            s *= 2

        for gen_name in parse_csv_list(args.exp2_generators):
            for size_b in sizes:
                print(f"[exp2] {gen_name} {size_b} bytes")
                run_experiment(rows, "exp2_size_scaling", gen_name, size_b, args.runs, args.seed + 10_000 + size_b)

    # Experiment 3: decoders head to head on 1 MB inputs
    if not args.no_exp3:
        mixed_specs = [
            ("english_like", 1 * 1024 * 1024),
            ("uniform256",   1 * 1024 * 1024),
            ("zipf128",      1 * 1024 * 1024),
            ("repetitive90", 1 * 1024 * 1024),
            ("repetitive99", 1 * 1024 * 1024),
            ("uniform128",   1 * 1024 * 1024),
        ]

        for gen_name, size_b in mixed_specs:
            print(f"[exp3] {gen_name} {size_b} bytes")
            run_experiment(rows, "exp3_pipeline_compare", gen_name, size_b, args.runs,
                           args.seed + 200_000 + size_b, label=f"{gen_name}_{size_b//1024}kb")

    # Write raw and summary
    metrics_csv = outdir / "metrics.csv"
    summary_csv = outdir / "summary.csv"
    write_csv(metrics_csv, rows)
    group_summary(rows, summary_csv)

    # Plots
    if not args.no_plots:
        plot_experiment_1(rows, outdir)
        plot_experiment_2(rows, outdir)
        plot_experiment_3(rows, outdir)

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    print(f"Wrote {len(rows)} rows to {metrics_csv}")
    print(f"Wrote grouped summary to {summary_csv}")
    print(f"Correctness rate across all runs: {ok_rate:.3f}")
    if not args.no_plots:
        print("Charts saved in:", outdir.resolve())
    return 0 if ok_rate == 1.0 or not rows else 1


if __name__ == "__main__":
    raise SystemExit(main())
