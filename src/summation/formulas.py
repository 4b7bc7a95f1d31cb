"""Three ways to add up the integers from 1 to n.

All of them return 0 for ``n == 0`` and reject negative input.
"""


def _ensure_non_negative(n: int) -> None:
    if n < 0:
        raise ValueError(f"n must be a non-negative integer, got {n}")


def sum_to_n_a(n: int) -> int:
    """Closed form: n(n + 1) / 2."""
    _ensure_non_negative(n)
    return n * (n + 1) // 2


def sum_to_n_b(n: int) -> int:
    """Recursive sum. Depth grows with n, so large inputs hit the recursion limit."""
    _ensure_non_negative(n)
    if n == 0:
        return 0
    return n + sum_to_n_b(n - 1)


def sum_to_n_c(n: int) -> int:
    """Iterative sum."""
    _ensure_non_negative(n)
    total = 0
    for i in range(1, n + 1):
        total += i
    return total


SUM_TO_N_IMPLEMENTATIONS = (sum_to_n_a, sum_to_n_b, sum_to_n_c)
