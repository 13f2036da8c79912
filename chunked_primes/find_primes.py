"""
find_primes.py

Trial-division primality check and the linear range scan used by every worker.
"""


def is_prime(n: int) -> bool:
    if n < 2:
        return False
    if n == 2:
        return True
    if n % 2 == 0:
        return False
    i = 3
    while i * i <= n:
        if n % i == 0:
            return False
        i += 2
    return True


def primes_in_range(start: int, end: int) -> list:
    """
    Return the primes in [start..end] in ascending order.
    An empty range (start > end) yields an empty list.
    """
    primes = []
    for num in range(start, end + 1):
        if is_prime(num):
            primes.append(num)
    return primes
