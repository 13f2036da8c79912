from chunked_primes.find_primes import is_prime, primes_in_range


def naive_is_prime(n):
    if n < 2:
        return False
    return all(n % d for d in range(2, n))


def test_is_prime_matches_naive_reference():
    for n in range(0, 10001):
        assert is_prime(n) == naive_is_prime(n), n


def test_is_prime_small_values():
    assert not is_prime(-7)
    assert not is_prime(0)
    assert not is_prime(1)
    assert is_prime(2)
    assert is_prime(3)
    assert not is_prime(4)
    assert not is_prime(9)
    assert not is_prime(25)
    assert is_prime(7919)


def test_primes_in_range_is_ascending():
    assert primes_in_range(1, 30) == [2, 3, 5, 7, 11, 13, 17, 19, 23, 29]
    assert primes_in_range(14, 26) == [17, 19, 23]


def test_primes_in_empty_range():
    assert primes_in_range(7, 5) == []
    assert primes_in_range(1, 0) == []
