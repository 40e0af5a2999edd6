"""Command line entry point: generate a points table or look up a scalar."""

from __future__ import annotations

import re
import sqlite3
import sys

from .builder import generate
from .db import PointsDatabase
from .filters import ScalarFilter

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

_U64_MAX = (1 << 64) - 1
_U32_MASK = (1 << 32) - 1
_U16_MASK = (1 << 16) - 1

_UINT_RE = re.compile(r"\s*\+?(\d+)")
_SHORT_FLAGS = frozenset("bstpnoL")


def _parse_uint(text: str | None) -> int:
    """Leading decimal digits of ``text``, 0 when there are none, saturated at 2**64 - 1."""
    if text is None:
        return 0
    match = _UINT_RE.match(text)
    if match is None:
        return 0
    return min(int(match.group(1)), _U64_MAX)


def _fail(message: str) -> int:
    print(message, file=sys.stderr)
    return EXIT_FAILURE


def _lookup(db_name: str | None, lookup_x: str) -> int:
    if db_name is None:
        return _fail("DB name required for lookup")
    if len(lookup_x) != 64:
        return _fail("X must be 32 bytes hex")
    try:
        x = bytes.fromhex(lookup_x)
    except ValueError:
        return _fail("X must be 32 bytes hex")

    with PointsDatabase(db_name) as db:
        scalar = db.lookup(x)

    if scalar is None:
        print("Not found")
        return EXIT_FAILURE
    print(f"Scalar: {scalar}")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    """Run the command with ``argv`` (default: the process arguments)."""
    args = sys.argv[1:] if argv is None else list(argv)

    base_key: str | None = None
    range_size = 0
    num_loops = 1
    num_threads = 1
    progress_interval = 3
    db_name: str | None = None
    lookup_x: str | None = None
    prime_only = False
    triangular_only = False
    modulo = 0
    use_modulo = False

    it = iter(args)
    for arg in it:
        if arg.startswith("--"):
            if arg == "--prime-only":
                prime_only = True
            elif arg == "--triangular-only":
                triangular_only = True
            elif arg == "--modulo":
                value = next(it, None)
                if value is None:
                    return _fail("--modulo requires a value")
                use_modulo = True
                modulo = _parse_uint(value)
            else:
                return _fail(f"Unknown argument {arg}")
        elif len(arg) == 2 and arg[0] == "-":
            flag = arg[1]
            if flag not in _SHORT_FLAGS:
                return _fail(f"Unknown argument {arg}")
            value = next(it, None)
            if flag == "b":
                base_key = value
            elif flag == "s":
                range_size = _parse_uint(value)
            elif flag == "t":
                num_threads = _parse_uint(value) & _U16_MASK
            elif flag == "p":
                progress_interval = _parse_uint(value) & _U32_MASK
            elif flag == "n":
                num_loops = _parse_uint(value) & _U32_MASK
            elif flag == "o":
                db_name = value
            else:
                lookup_x = value
        else:
            return _fail(f"Unknown argument {arg}")

    if lookup_x:
        return _lookup(db_name, lookup_x)

    if base_key is None:
        return _fail("Base key is required.")
    if range_size == 0:
        return _fail("Range size cannot be 0")
    if num_threads == 0:
        return _fail("Num threads cannot be 0")
    if num_loops == 0:
        return _fail("Loop count cannot be 0")

    if db_name is None:
        print("No DB name given - compute only mode")

    try:
        scalar_filter = ScalarFilter(prime_only, triangular_only, modulo, use_modulo)
    except ValueError as exc:
        return _fail(str(exc))

    try:
        generate(
            base_key,
            range_size,
            num_loops,
            num_threads,
            progress_interval,
            db_name,
            scalar_filter,
        )
    except (ValueError, sqlite3.Error) as exc:
        print(exc, file=sys.stderr)
        return _fail(f"[{getattr(exc, 'code', -1)}] Failed")

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())