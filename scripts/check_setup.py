#!/usr/bin/env python3
"""Simple check of configuration, data source and basic functionality."""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

print("Checking Quotation Engine Setup...")
print("=" * 60)

# Check 1: Configuration
print("\n1. Checking configuration...")
try:
    from quotation_engine.config import get_config
    config = get_config()
    print(f"   ✓ Config loaded from {config.path}")
    print(f"   - Database provider: {config.database_provider}")
    print(f"   - Cache directory: {config.cache_dir}")
except Exception as e:
    print(f"   ✗ Config error: {e}")
    sys.exit(1)

# Check 2: Quotation source
print("\n2. Checking quotation source...")
try:
    from quotation_engine.data import get_quotation_source
    source = get_quotation_source()
    print(f"   ✓ Quotation source initialized: {type(source).__name__}")

    if source.health_check():
        print(f"   ✓ Health check passed")
    else:
        print(f"   ⚠ Health check failed (check tables or DSN)")
except Exception as e:
    print(f"   ✗ Quotation source error: {e}")

# Check 3: Formulas
print("\n3. Checking model formulas...")
try:
    from quotation_engine.features import load_formulas
    formulas = load_formulas(config)
    for name, formula in formulas.items():
        print(f"   - {name}: {formula}")
except Exception as e:
    print(f"   ✗ Formula error: {e}")

# Check 4: Model libraries
print("\n4. Checking model libraries...")
try:
    from quotation_engine.models import ModelGrid
    print(f"   ✓ LightGBM, XGBoost, CatBoost and scikit-learn importable")
except Exception as e:
    print(f"   ✗ Model library error: {e}")

# Check 5: Proportion formula
print("\n5. Checking proportion formula...")
try:
    from quotation_engine.verification import verify_proportion_formula
    result = verify_proportion_formula()
    if result.passed:
        print(f"   ✓ Matrix formula matches reference")
    else:
        print(f"   ✗ Matrix formula differs by {result.max_difference:.3g}")
except Exception as e:
    print(f"   ✗ Verification error: {e}")

print("\n" + "=" * 60)
print("Setup check complete!")
print("\nNext steps:")
print("  - If LightGBM/XGBoost errors on macOS: brew install libomp")
print("  - Run: python3 scripts/train_quotation_models.py")
