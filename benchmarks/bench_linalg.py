import argparse
import statistics
import time
from typing import Callable, Iterable, Tuple

import numpy as np
from densela import linalg
from densela.backend import device as backend_device
from densela.backend import matrix as mx


def time_many(
    fn: Callable[[], None], repeats: int, warmup: int = 1
) -> Tuple[float, float, float]:
    # warmup
    for _ in range(warmup):
        fn()
    times = []
    for _ in range(repeats):
        t0 = time.perf_counter()
        fn()
        t1 = time.perf_counter()
        times.append((t1 - t0) * 1000.0)  # ms
    return min(times), statistics.median(times), max(times)


def well_conditioned(n: int, dtype: str) -> np.ndarray:
    if dtype != "float":
        # lower triangular with a diagonal of 2 fits every integer dtype
        return 2 * np.eye(n, dtype=np.int64) + np.tril(
            np.random.randint(0, 2, size=(n, n)), -1
        )
    return np.random.uniform(-1.0, 1.0, size=(n, n)) + (n + 1) * np.eye(n)


def numpy_time(
    op: str, n: int, repeats: int, warmup: int
) -> Tuple[float, float, float]:
    a = well_conditioned(n, "float")

    def run() -> None:
        if op == "dot":
            _ = a @ a
        elif op == "inv":
            _ = np.linalg.inv(a)
        else:
            _ = np.linalg.det(a)

    return time_many(run, repeats=repeats, warmup=warmup)


def densela_time(
    op: str, n: int, dtype: str, repeats: int, warmup: int
) -> Tuple[float, float, float]:
    dev = backend_device.cpu_numpy()
    a = mx.array(well_conditioned(n, dtype), dtype=dtype, device=dev)

    def run() -> None:
        if op == "dot":
            _ = linalg.dot(a, a)
        elif op == "inv":
            _ = linalg.inv(a)
        else:
            _ = linalg.det(a)

    return time_many(run, repeats=repeats, warmup=warmup)


def parse_sizes(s: str) -> Iterable[int]:
    """
    Parse square sizes separated by spaces, e.g. "16 64 128".
    """
    for g in s.strip().split():
        n = int(g)
        if n <= 0:
            raise ValueError(f"Invalid size: {g}")
        yield n


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Benchmark dot/inv/det: NumPy vs densela"
    )
    parser.add_argument(
        "--sizes",
        type=str,
        default="16 64 128 256",
        help='Space-separated square sizes. Example: "16 64 128".',
    )
    parser.add_argument(
        "--ops",
        type=str,
        default="dot inv det",
        help='Space-separated subset of "dot inv det".',
    )
    parser.add_argument(
        "--dtype",
        type=str,
        default="float",
        choices=["int8", "uint8", "int16", "uint16", "float"],
        help="Storage dtype of the densela operand",
    )
    parser.add_argument(
        "--repeats", type=int, default=5, help="Number of timed runs per case"
    )
    parser.add_argument("--warmup", type=int, default=1, help="Warmup runs per case")
    parser.add_argument("--seed", type=int, default=0, help="Random seed")
    args = parser.parse_args()

    np.random.seed(args.seed)
    ops = args.ops.split()
    for op in ops:
        if op not in ("dot", "inv", "det"):
            parser.error(f"unknown op: {op}")

    header = (
        f"{'op':>4} | {'n':>6} | {'NumPy ms (min/med/max)':>28}"
        f" | {'densela ms (min/med/max)':>28} | {'slowdown (med)':>14}"
    )
    print(header)
    print("-" * len(header))

    for op in ops:
        for n in parse_sizes(args.sizes):
            np_min, np_med, np_max = numpy_time(
                op, n, repeats=args.repeats, warmup=args.warmup
            )
            dl_min, dl_med, dl_max = densela_time(
                op, n, args.dtype, repeats=args.repeats, warmup=args.warmup
            )
            slowdown = dl_med / np_med if np_med > 0 else float("inf")
            print(
                f"{op:>4} | {n:>6} | {np_min:7.2f}/{np_med:7.2f}/{np_max:7.2f}"
                f"      | {dl_min:7.2f}/{dl_med:7.2f}/{dl_max:7.2f}"
                f"      | {slowdown:>13.2f}x"
            )


if __name__ == "__main__":
    main()
