"""Range planning, range validation and the top-level generation run."""

from __future__ import annotations

import re
import sys
import time
from contextlib import ExitStack

from .batch import NUM_CONST_POINTS, batch_add_range
from .curve import N, Point, hex_pub_to_point, scalar_to_point
from .db import PointsDatabase
from .filters import ScalarFilter

_HEX_RE = re.compile(r"[0-9a-fA-F]+")


class RangeError(ValueError):
    """Raised when a key range cannot be computed correctly."""

    def __init__(self, message: str, code: int = -1) -> None:
        super().__init__(message)
        self.code = code


def compute_num_launches(
    range_size: int,
    num_const_points: int,
    num_threads: int,
    num_loops_per_thread: int,
) -> tuple[int, int]:
    """Return the number of launches covering the range, and the adjusted range.

    The range is rounded up to a whole number of launches.
    """
    per_launch = num_threads * num_loops_per_thread * (num_const_points * 2 - 1)
    if per_launch <= 0:
        raise ValueError("points per launch must be positive")

    num_launches, left_over = divmod(range_size, per_launch)
    adjusted = range_size
    if left_over:
        num_launches += 1
        adjusted += per_launch - left_over

    print(f" Points/launch: {per_launch}")
    print(f"Range overhead: {adjusted - range_size}")
    print(f"Required range: {range_size}")
    print(f"Adjusted range: {adjusted}")
    return num_launches, adjusted


def validate_range(base_key: int, range_size: int, num_total_loops: int) -> None:
    """Check that a scalar-based range stays below N and never adds equal X values."""
    last_key = base_key + range_size - 1
    print(f"Last Key: {last_key:064x}")

    # Every scalar of the range must be below N; this also rejects a base key >= N.
    if last_key >= N:
        print("Range exceeds N - 1.", file=sys.stderr)
        raise RangeError("Range exceeds N - 1.", -1)

    # Pivot == Const[0] on the first loop, or the last pivot == -Const[0].
    code = 0
    if base_key == NUM_CONST_POINTS:
        code = -2
    else:
        last_pivot = (
            num_total_loops * (NUM_CONST_POINTS * 2 - 1) + NUM_CONST_POINTS - 1 + base_key
        )
        if last_pivot == N:
            code = -3

    if code:
        message = "Cannot compute this range - decrease base key by 1."
        print(message, file=sys.stderr)
        raise RangeError(message, code)


def validate_range_pub_base(
    base_point: Point, range_size: int, num_total_loops: int
) -> None:
    """Check a public-key-based range for the X collisions detectable without the scalar."""
    print("Warning: assuming end of range is below N.", file=sys.stderr)
    print("\tIf this is not true, results will be wrong.", file=sys.stderr)

    code = 0
    forbidden = scalar_to_point(NUM_CONST_POINTS)
    if base_point.x == forbidden.x:
        code = -2
    else:
        # The check is made against the step of a single loop.
        loops = 1
        forbidden = scalar_to_point(
            loops * (NUM_CONST_POINTS * 2 - 1) + NUM_CONST_POINTS - 1
        )
        if base_point.x == forbidden.x:
            code = -3

    if code:
        message = "Cannot compute this range - decrease base key by G."
        print(message, file=sys.stderr)
        raise RangeError(message, code)


def _parse_base_key(base_key: str) -> int:
    if not _HEX_RE.fullmatch(base_key):
        raise ValueError("Invalid base key")
    value = int(base_key, 16)
    if value == 0:
        raise ValueError("Invalid base key")
    return value


def generate(
    base_key: str,
    range_size: int,
    num_loops_per_thread: int = 1,
    num_threads: int = 1,
    progress_min_interval: float = 3,
    db_name: str | None = None,
    filter: ScalarFilter | None = None,
) -> int:
    """Generate every point of the range, storing them when ``db_name`` is given.

    ``base_key`` is a hex private key, or a hex serialized public key when it
    is longer than 64 characters. Returns the adjusted range size.
    """
    num_launches, adjusted = compute_num_launches(
        range_size, NUM_CONST_POINTS, num_threads, num_loops_per_thread
    )
    total_loops = num_launches * num_loops_per_thread

    scalar: int | None = None
    base_point: Point | None = None
    if len(base_key) > 32 * 2:
        base_point = hex_pub_to_point(base_key)
        print(f"Base Pub: {base_key}")
        validate_range_pub_base(base_point, adjusted, total_loops)
    else:
        scalar = _parse_base_key(base_key)
        print(f"Base Key: {scalar:064x}")
        validate_range(scalar, adjusted, total_loops)

    with ExitStack() as stack:
        callback = None
        if db_name is not None:
            db = stack.enter_context(PointsDatabase(db_name))
            callback = db.insert

        clock_start = time.process_time()
        wall_start = time.perf_counter()
        batch_add_range(
            num_launches,
            num_loops_per_thread,
            num_threads,
            base_key=scalar,
            base_point=base_point,
            callback=callback,
            progress_min_interval=progress_min_interval,
            filter=filter,
        )
        wall_end = time.perf_counter()
        clock_end = time.process_time()

    wall = wall_end - wall_start
    speed = adjusted / wall if wall > 0 else 0.0
    print(f"Overall gen & store speed: {speed:.3f} keys/s")
    print(f"Total clock time: {clock_end - clock_start:.3f}")
    print(f"Total wall time: {wall:.3f}")
    return adjusted