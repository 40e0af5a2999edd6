import pytest

from pointsbuilder.filters import ScalarFilter, is_prime, is_triangular


def test_zero_and_one_not_prime():
    assert is_prime(0) is False
    assert is_prime(1) is False


def test_smallest_prime():
    assert is_prime(2) is True


@pytest.mark.parametrize("a,b", [(2, 2), (3, 7), (101, 103), (65521, 65519)])
def test_products_are_composite(a, b):
    assert is_prime(a * b) is False


def test_primes_have_no_prime_products_between():
    primes = [v for v in range(2, 100) if is_prime(v)]
    for p in primes:
        for q in primes:
            assert not is_prime(p * q)


@pytest.mark.parametrize("n", [0, 1, 2, 10, 1000, 10**9])
def test_triangular_numbers(n):
    t = n * (n + 1) // 2
    assert is_triangular(t)
    if n >= 2:
        assert not is_triangular(t + 1)
        assert not is_triangular(t - 1)


def test_default_filter_matches_everything():
    f = ScalarFilter()
    assert all(f.matches(v) for v in range(50))


@pytest.mark.parametrize("m", [2, 7, 1000])
def test_modulo_filter(m):
    f = ScalarFilter(modulo=m, use_modulo=True)
    for k in range(5):
        assert f.matches(k * m)
        assert not f.matches(k * m + 1)


def test_modulo_ignored_when_disabled():
    f = ScalarFilter(modulo=3, use_modulo=False)
    assert f.matches(4)


def test_zero_modulo_rejected():
    with pytest.raises(ValueError):
        ScalarFilter(modulo=0, use_modulo=True)


def test_single_filters_agree_with_predicates():
    prime = ScalarFilter(prime_only=True)
    tri = ScalarFilter(triangular_only=True)
    for v in range(300):
        assert prime.matches(v) == is_prime(v)
        assert tri.matches(v) == is_triangular(v)


def test_combined_filter_is_intersection_subset():
    prime = ScalarFilter(prime_only=True)
    tri = ScalarFilter(triangular_only=True)
    both = ScalarFilter(prime_only=True, triangular_only=True)
    matched = [v for v in range(300) if both.matches(v)]
    assert matched
    for v in matched:
        assert prime.matches(v) and tri.matches(v)