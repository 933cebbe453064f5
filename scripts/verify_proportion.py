"""Check the proportion-of-verse-quoted formula on the example texts."""

import sys
from pathlib import Path

import pandas as pd

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from quotation_engine.verification import verify_proportion_formula


def main() -> int:
    result = verify_proportion_formula()

    print("Proportion of each verse quoted (documents x verses):")
    print("=" * 80)
    with pd.option_context('display.width', 120, 'display.precision', 3):
        print(result.proportions)
    print("=" * 80)

    if result.passed:
        print("PASS: matrix formula matches the token set reference")
        return 0

    print(f"FAIL: largest difference {result.max_difference:.3g}")
    print("Reference values:")
    print(result.expected)
    return 1


if __name__ == '__main__':
    sys.exit(main())
