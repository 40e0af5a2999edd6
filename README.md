# pointsbuilder

`pointsbuilder` walks a contiguous range of secp256k1 scalars. For every scalar
in the range it computes the point `k·G`. It can store each point's X
coordinate in a SQLite database, together with the scalar's offset from the
start of the range. You can then query the table to turn an X coordinate back
into its offset.

## How points are computed

Points are produced with batched affine addition. The package builds a table of
constant points: the step `(2C-1)·G`, followed by `1·G … (C-1)·G`. By default
`C = 512`. Each constant is added to and subtracted from a moving pivot. All the
field inversions of one batch are combined into a single inversion. Each batch
therefore yields `2C - 1` consecutive points. The pivot then moves forward by
the step to the centre of the next run.

The package uses only the Python standard library.

## Installation

```
pip install .
```

To install it together with the test dependencies:

```
pip install ".[test]"
```

## Command line

Installing the package provides the `pointsbuilder` command.

### Generating a table

```
pointsbuilder -b 1 -s 100000 -t 4 -n 2 -o points.db
```

| Option | Meaning | Default |
| --- | --- | --- |
| `-b KEY` | Base key. Either a hex scalar, or a hex-encoded public key. A compressed key is 66 characters and an uncompressed key is 130 | required |
| `-s N` | Number of points in the range. It is rounded up to a whole number of launches | required, non-zero |
| `-t N` | Number of pivot sequences the range is split into | 1 |
| `-n N` | Loops per pivot sequence in one launch | 1 |
| `-p SECONDS` | Least time between progress reports. `0` turns progress reports off | 3 |
| `-o FILE` | SQLite database to write. Without it, points are only computed | none |
| `--prime-only` | Store only points whose offset is prime | off |
| `--triangular-only` | Store only points whose offset is a triangular number | off |
| `--modulo N` | Store only points whose offset is divisible by `N`. `N` must not be 0 | off |

The filters test the offset from the start of the range, not the absolute
scalar. They can be combined.

If the base key is a scalar, the whole range must stay below the curve order
`N`. When the base key is a public key, the scalar is unknown, so this cannot be
checked and a warning is printed instead.

A range is rejected if a pivot would share its X coordinate with the step
point. In that case the command suggests lowering the base key by one, or by
`G` when the base key is a public key. On any error the command prints
`[<code>] Failed` and exits with status 1.

### Looking up an X coordinate

X coordinates are stored as 32 little-endian bytes. The value given to `-L` is
those 32 bytes written as 64 hex characters. For example, this looks up the X
coordinate of `G`, which is offset 0 in a table built with `-b 1`:

```
pointsbuilder -o points.db -L 9817f8165b81f259d928ce2ddbfc9b02070b87ce9562a055acbbdcf97e66be79
```

If the X coordinate is in the table, the command prints `Scalar: <offset>` and
exits with status 0. Otherwise it prints `Not found` and exits with status 1.

## Library use

### Curve arithmetic: `pointsbuilder.curve`

```python
from pointsbuilder.curve import INFINITY, scalar_to_point, hex_pub_to_point

p = scalar_to_point(5)
q = scalar_to_point(2) + scalar_to_point(3)
assert p == q
assert p + (-p) == INFINITY
assert scalar_to_point(2).multiply(3) == scalar_to_point(6)
```

- `Point` is an immutable affine point. `Point()` is the point at infinity.
- `Point.x_bytes()` returns the X coordinate as 32 little-endian bytes.
- `Point.y_parity()` returns the lowest bit of the Y coordinate.
- `scalar_to_point(k)` accepts scalars in `[1, N - 1]`.
- `parse_public_key(data)` accepts serialized public key bytes.
- `hex_pub_to_point(hex_pub)` accepts the same key as hex text.
- `field_inverse(a)` inverts modulo the field prime.

Invalid input raises `CurveError`.

### Filters: `pointsbuilder.filters`

```python
from pointsbuilder.filters import ScalarFilter, is_prime, is_triangular

f = ScalarFilter(prime_only=True)
assert f.matches(7)
assert not f.matches(8)
assert ScalarFilter(modulo=5, use_modulo=True).matches(10)
assert is_triangular(10)
assert is_prime(13)
```

`ScalarFilter(use_modulo=True, modulo=0)` raises `ValueError`.

### Storage: `pointsbuilder.db`

```python
from pointsbuilder.db import PointsDatabase

with PointsDatabase("points.db") as db:
    db.insert(42, bytes(32), 0)
    assert db.lookup(bytes(32)) == 42
```

`lookup` returns `None` when the X coordinate is absent. An insert is ignored
if the X coordinate is already stored. Both methods need exactly 32 bytes.

Writes happen inside one open transaction. That transaction is committed by
`close()`, or when the `with` block ends.

### Batches: `pointsbuilder.batch`

- `compute_const_points(num_points)` builds the constant table.
- `batch_addition(pivot, const_points)` returns the `2C - 1` points centred on
  `pivot`, together with the next pivot.
- `compute_pivots(...)` gives the starting pivot of each sequence.
- `batch_add_range(...)` runs the whole range. It calls
  `callback(offset, x_bytes, y_parity)` for every point accepted by the filter.

### Generating programmatically: `pointsbuilder.builder`

```python
from pointsbuilder.builder import generate
from pointsbuilder.filters import ScalarFilter

adjusted = generate(
    base_key="1",
    range_size=10_000,
    num_loops_per_thread=1,
    num_threads=2,
    progress_min_interval=0,
    db_name="points.db",
    filter=ScalarFilter(),
)
```

`generate` returns the adjusted range size. It raises `RangeError`, which
carries a `code` attribute, when the range cannot be computed. It raises
`ValueError` or `CurveError` when the base key is invalid.

Other helpers in this module:

- `compute_num_launches` returns the launch count and the adjusted range.
- `validate_range` and `validate_range_pub_base` run the range checks on their
  own.

## What it does not do

- Pivot sequences (`-t`) are computed one after another in a single process.
  The option splits the range but does not run work in parallel.
- Generated points are not checked against independently computed values.
- With a public-key base, a range that passes the curve order `N` is not
  detected.

## Running the tests

```
pip install ".[test]"
pytest
```