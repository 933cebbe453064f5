"""Script to train and compare the quotation classifiers."""

import sys
import argparse
from pathlib import Path

import pandas as pd

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from quotation_engine.config import get_config, setup_logging
from quotation_engine.data import get_quotation_source, load_or_create_split, prepare_labeled_data
from quotation_engine.data.splits import TEST_FILE, TRAIN_FILE
from quotation_engine.features import load_formulas
from quotation_engine.models import ModelGrid, compare_families
from quotation_engine.models.grid import MODEL_FAMILIES


def main(families=None):
    """Train every model family over its grid and save the best model."""
    config = get_config()
    setup_logging()

    cache_dir = Path(config.cache_dir)
    families = families or list(MODEL_FAMILIES)

    # Only hit the database when there is no cached split
    labeled = None
    if not ((cache_dir / TRAIN_FILE).exists() and (cache_dir / TEST_FILE).exists()):
        print(f"Loading labeled quotations ({config.database_provider})...")
        source = get_quotation_source()
        labeled = prepare_labeled_data(source.get_labeled_quotations(), config.lds_versions)
        print(f"Labeled quotations: {len(labeled)}")

    train, test = load_or_create_split(
        labeled,
        str(cache_dir),
        test_proportion=config.test_proportion,
        random_state=config.random_seed
    )
    print(f"Training samples: {len(train)}, test samples: {len(test)}")
    print(f"Quotation rate: {(train['label'] == 'quotation').mean():.4f}")

    formulas = load_formulas(config)
    print(f"Formulas: {', '.join(formulas)}")

    grids = {}
    for family in families:
        print(f"\nTraining {family} models...")
        grid = ModelGrid.from_config(family, formulas, config)
        results = grid.run(train, test)
        grids[family] = grid
        best = results.iloc[0]
        print(f"  {len(results)} models, best balanced accuracy {best['balanced_accuracy']:.4f} ({best['formula']})")

    ranked = compare_families(grid.results for grid in grids.values())

    print("\nTop models:")
    print("=" * 80)
    columns = ['model', 'formula', 'balanced_accuracy', 'precision', 'recall', 'kappa']
    with pd.option_context('display.width', 120):
        print(ranked[columns].head(10).to_string(index=False))

    results_path = cache_dir / 'model_results.csv'
    ranked.to_csv(results_path, index=False)
    print(f"\nAll results saved to: {results_path}")

    # Save overall best model
    winner = ranked.iloc[0]
    best_model = grids[winner['model']].best_model()
    model_dir = Path('models/saved')
    model_dir.mkdir(parents=True, exist_ok=True)
    model_path = model_dir / f"quotation_model_{winner['model']}_{winner['formula']}.pkl"
    best_model.save(str(model_path))

    print(f"Model saved to: {model_path}")
    print("Training complete!")


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Train and compare quotation classifiers')
    parser.add_argument(
        '--families',
        nargs='+',
        choices=sorted(MODEL_FAMILIES),
        help='Model families to train (default: all)'
    )
    args = parser.parse_args()
    main(args.families)
