from loggers import get_logger
from src.summation.formulas import SUM_TO_N_IMPLEMENTATIONS

logger = get_logger("scripts.check_sum_to_n", plain_format=True)

CASES = {5: 15, 21: 231, 32: 528, 14: 105, 35: 630, 10: 55}


def check_sum_to_n() -> None:
    """
    Runs every sum_to_n implementation against the known results.
    """
    failures = 0
    for n, expected in CASES.items():
        for implementation in SUM_TO_N_IMPLEMENTATIONS:
            result = implementation(n)
            if result != expected:
                failures += 1
                logger.error(
                    "%s(%s): expected %s, but got %s",
                    implementation.__name__,
                    n,
                    expected,
                    result,
                )
            else:
                logger.info("%s(%s) passed: %s", implementation.__name__, n, result)

    if failures:
        raise SystemExit(1)


if __name__ == "__main__":
    check_sum_to_n()
