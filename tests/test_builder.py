import sqlite3

import pytest

from pointsbuilder.batch import NUM_CONST_POINTS
from pointsbuilder.builder import (
    RangeError,
    compute_num_launches,
    generate,
    validate_range,
    validate_range_pub_base,
)
from pointsbuilder.curve import N, CurveError, scalar_to_point
from pointsbuilder.db import PointsDatabase
from pointsbuilder.filters import ScalarFilter


def _compressed_hex(k):
    point = scalar_to_point(k)
    prefix = "03" if point.y & 1 else "02"
    return prefix + point.x.to_bytes(32, "big").hex()


@pytest.mark.parametrize(
    "range_size, threads, loops",
    [(1, 1, 1), (1023, 1, 1), (1024, 1, 1), (5000, 2, 3), (10**6, 4, 2)],
)
def test_num_launches_cover_range(range_size, threads, loops):
    per_launch = threads * loops * (2 * NUM_CONST_POINTS - 1)
    launches, adjusted = compute_num_launches(range_size, NUM_CONST_POINTS, threads, loops)
    assert adjusted >= range_size
    assert adjusted - range_size < per_launch
    assert launches * per_launch == adjusted


def test_num_launches_exact_multiple_is_unchanged(capsys):
    launches, adjusted = compute_num_launches(1023, 512, 1, 1)
    assert (launches, adjusted) == (1, 1023)
    assert "Range overhead: 0" in capsys.readouterr().out


def test_num_launches_rejects_zero_threads():
    with pytest.raises(ValueError):
        compute_num_launches(10, NUM_CONST_POINTS, 0, 1)


def test_validate_range_rejects_pivot_equal_to_const():
    with pytest.raises(RangeError) as info:
        validate_range(NUM_CONST_POINTS, 1, 1)
    assert info.value.code == -2


def test_validate_range_rejects_last_pivot_at_n():
    loops = 1
    base = N - loops * (2 * NUM_CONST_POINTS - 1) - (NUM_CONST_POINTS - 1)
    with pytest.raises(RangeError) as info:
        validate_range(base, 1, loops)
    assert info.value.code == -3


def test_validate_range_rejects_range_past_n():
    with pytest.raises(RangeError) as info:
        validate_range(N - 1, 2, 1)
    assert info.value.code == -1


def test_validate_range_prints_last_key(capsys):
    validate_range(1, 1, 1)
    assert f"Last Key: {1:064x}" in capsys.readouterr().out


def test_validate_pub_base_rejects_const_point():
    with pytest.raises(RangeError) as info:
        validate_range_pub_base(scalar_to_point(NUM_CONST_POINTS), 1, 1)
    assert info.value.code == -2


def test_validate_pub_base_rejects_negated_const_point():
    with pytest.raises(RangeError) as info:
        validate_range_pub_base(-scalar_to_point(NUM_CONST_POINTS), 1, 1)
    assert info.value.code == -2


def test_validate_pub_base_rejects_last_pivot_point():
    with pytest.raises(RangeError) as info:
        validate_range_pub_base(scalar_to_point(3 * NUM_CONST_POINTS - 2), 1, 1)
    assert info.value.code == -3


def test_validate_pub_base_warns(capsys):
    validate_range_pub_base(scalar_to_point(5), 1, 1)
    assert "Warning: assuming end of range is below N." in capsys.readouterr().err


def test_generate_stores_offsets(tmp_path):
    path = tmp_path / "pts.db"
    adjusted = generate("1", 1, 1, 1, 0, str(path))
    assert adjusted == 2 * NUM_CONST_POINTS - 1
    with PointsDatabase(path) as db:
        assert db.lookup(scalar_to_point(1).x_bytes()) == 0
        assert db.lookup(scalar_to_point(6).x_bytes()) == 5
        assert db.lookup(scalar_to_point(adjusted).x_bytes()) == adjusted - 1
    with sqlite3.connect(path) as conn:
        assert conn.execute("SELECT COUNT(*) FROM pts").fetchone()[0] == adjusted


def test_generate_from_public_key(tmp_path):
    path = tmp_path / "pub.db"
    generate(_compressed_hex(1), 1, 1, 1, 0, str(path))
    with PointsDatabase(path) as db:
        assert db.lookup(scalar_to_point(8).x_bytes()) == 7


def test_generate_applies_filter(tmp_path):
    path = tmp_path / "filtered.db"
    generate("1", 1, 1, 1, 0, str(path), ScalarFilter(modulo=2, use_modulo=True))
    with PointsDatabase(path) as db:
        assert db.lookup(scalar_to_point(1 + 3).x_bytes()) is None
        assert db.lookup(scalar_to_point(1 + 4).x_bytes()) == 4


def test_generate_compute_only(capsys):
    adjusted = generate("1", 1, 1, 1, 0, None)
    assert adjusted == 2 * NUM_CONST_POINTS - 1
    assert f"Computing ~ {adjusted} points..." in capsys.readouterr().out


@pytest.mark.parametrize("key", ["xyz", "0", ""])
def test_generate_rejects_invalid_base_key(key):
    with pytest.raises(ValueError, match="Invalid base key"):
        generate(key, 1, 1, 1, 0, None)


def test_generate_rejects_forbidden_base():
    with pytest.raises(RangeError) as info:
        generate(f"{NUM_CONST_POINTS:x}", 1, 1, 1, 0, None)
    assert info.value.code == -2


def test_generate_rejects_bad_public_key():
    with pytest.raises(CurveError):
        generate("02" + "ff" * 32, 1, 1, 1, 0, None)