"""Batched generation of consecutive secp256k1 points around moving pivots.

Each pivot P produces the points P - (C-1)G .. P + (C-1)G from one shared
batch inversion. The pivot then moves by (2C - 1)G, which makes it the
centre of the next run of 2C - 1 consecutive keys.
"""

from __future__ import annotations

import sys
import time
from collections.abc import Callable, Sequence

from .curve import P, CurveError, Point, field_inverse, scalar_to_point
from .filters import ScalarFilter

NUM_CONST_POINTS = 512
MAX_THREADS = 1024

ResultCallback = Callable[[int, bytes, int], None]


def compute_const_points(num_points: int) -> list[Point]:
    """Return ``[(2C-1)G, G, 2G, ..., (C-1)G]`` for ``C = num_points``.

    The first entry is the step from one pivot to the next; the rest are
    the offsets added to and subtracted from each pivot.
    """
    if num_points < 1:
        raise ValueError("number of constant points must be at least 1")
    points = [scalar_to_point(2 * num_points - 1)]
    if num_points < 2:
        return points
    g = scalar_to_point(1)
    current = g
    points.append(current)
    for _ in range(num_points - 2):
        current = current + g
        points.append(current)
    return points


def _batch_inverse(values: Sequence[int]) -> list[int]:
    """Invert every value with a single field inversion."""
    prefix = []
    acc = 1
    for value in values:
        acc = acc * value % P
        prefix.append(acc)
    inv = field_inverse(acc)
    result = [0] * len(values)
    for pos in range(len(values) - 1, 0, -1):
        result[pos] = inv * prefix[pos - 1] % P
        inv = inv * values[pos] % P
    result[0] = inv
    return result


def _chord(x1: int, y1: int, x2: int, y2: int, inv: int) -> Point:
    """Sum of two points with distinct X, given ``inv = 1 / (x1 - x2)``."""
    m = (y1 - y2) * inv % P
    x3 = (m * m - x1 - x2) % P
    y3 = (m * (x2 - x3) - y2) % P
    return Point(x3, y3)


def batch_addition(
    pivot: Point, const_points: Sequence[Point]
) -> tuple[list[Point], Point]:
    """Compute the 2C - 1 points centred on ``pivot`` and the next pivot.

    Returns the points ordered from ``pivot - (C-1)G`` to
    ``pivot + (C-1)G``, and ``pivot + const_points[0]``.
    """
    count = len(const_points)
    if count < 1:
        raise ValueError("at least one constant point is required")
    if pivot.is_infinity:
        raise CurveError("pivot is the point at infinity")
    if any(q.is_infinity for q in const_points):
        raise CurveError("constant point is the point at infinity")

    x1, y1 = pivot.x, pivot.y
    inverses = _batch_inverse([(x1 - q.x) % P for q in const_points])

    results: list[Point] = [pivot] * (2 * count - 1)
    centre = count - 1
    for offset in range(1, count):
        q = const_points[offset]
        inv = inverses[offset]
        results[centre + offset] = _chord(x1, y1, q.x, q.y, inv)
        results[centre - offset] = _chord(x1, y1, q.x, (-q.y) % P, inv)

    step = const_points[0]
    next_pivot = _chord(x1, y1, step.x, step.y, inverses[0])
    return results, next_pivot


def compute_pivots(
    base_point: Point | None,
    const_points: Sequence[Point],
    base_key: int | None,
    num_loops: int,
    num_threads: int,
) -> list[Point]:
    """Return the starting pivot of every thread.

    The first pivot is ``base + (C-1)G``; each following one is
    ``num_loops * (2C - 1)`` keys further along.
    """
    count = len(const_points)
    if count < 1:
        raise ValueError("at least one constant point is required")
    if num_threads < 1:
        raise ValueError("number of threads must be at least 1")

    if base_point is not None:
        offset = const_points[count - 1] if count > 1 else None
        first = base_point if offset is None else base_point + offset
    elif base_key is not None:
        first = scalar_to_point(base_key + count - 1)
    else:
        raise ValueError("either a base key or a base point is required")

    pivots = [first]
    if num_threads > 1:
        delta = scalar_to_point(num_loops * (2 * count - 1))
        for _ in range(num_threads - 1):
            pivots.append(pivots[-1] + delta)
    if any(p.is_infinity for p in pivots):
        raise CurveError("pivot is the point at infinity")
    return pivots


def batch_add_range(
    num_launches: int,
    num_loops_per_launch: int,
    num_threads: int,
    base_key: int | None = None,
    base_point: Point | None = None,
    callback: ResultCallback | None = None,
    progress_min_interval: float = 0,
    filter: ScalarFilter | None = None,
    num_const_points: int = NUM_CONST_POINTS,
) -> None:
    """Generate every point of the range and pass each to ``callback``.

    ``callback`` receives the key offset from the base, the X coordinate
    as 32 little-endian bytes and the Y parity. Offsets rejected by
    ``filter`` are skipped.
    """
    if num_launches < 1:
        raise ValueError("number of launches must be at least 1")
    if num_loops_per_launch < 1:
        raise ValueError("number of loops must be at least 1")
    if not 1 <= num_threads <= MAX_THREADS:
        raise ValueError(f"number of threads must be in [1, {MAX_THREADS}]")

    const_points = compute_const_points(num_const_points)
    results_size = 2 * num_const_points - 1
    res_per_launch = results_size * num_loops_per_launch
    pivot_stride = num_launches * res_per_launch

    print(
        f"Batch add: [T: {num_threads} L: {num_launches} x {num_loops_per_launch}]"
    )

    pivots = compute_pivots(
        base_point,
        const_points,
        base_key,
        num_launches * num_loops_per_launch,
        num_threads,
    )

    total_per_launch = res_per_launch * num_threads
    total = num_launches * total_per_launch
    print(f"Computing ~ {total} points...")

    start = time.monotonic()
    last_progress = start
    launch_offset = 0

    for launch in range(num_launches):
        outputs: list[list[list[Point]]] = []
        durations: list[float] = []
        for thread in range(num_threads):
            t_start = time.monotonic()
            loops = []
            pivot = pivots[thread]
            for _ in range(num_loops_per_launch):
                points, pivot = batch_addition(pivot, const_points)
                loops.append(points)
            pivots[thread] = pivot
            outputs.append(loops)
            durations.append(time.monotonic() - t_start)

        if launch == 0:
            for thread, elapsed in enumerate(durations):
                rate = num_loops_per_launch / (elapsed or 1.0)
                print(f"Thread {thread} throughput: {rate:.0f} loops/s")

        if progress_min_interval:
            now = time.monotonic()
            if now - last_progress >= progress_min_interval:
                elapsed = now - start
                done = (launch + 1) * total_per_launch
                speed = done / elapsed if elapsed else 0.0
                last_progress = now
                sys.stdout.write(
                    f"\r[{done * 100 / total:.1f}%] [{elapsed:.0f} s] "
                    f"BatchAdd speed: {speed:.0f} keys/s "
                    f"[{speed / (num_threads * 1_000_000):.1f} Mk/ts]"
                )
                sys.stdout.flush()

        if callback is not None:
            for thread, loops in enumerate(outputs):
                key = launch_offset + thread * pivot_stride
                for points in loops:
                    for point in points:
                        if filter is None or filter.matches(key):
                            callback(key, point.x_bytes(), point.y_parity())
                        key += 1

        launch_offset += res_per_launch

    print()