"""Compute potential quotation features for documents against Bible verses."""

import sys
import argparse
from pathlib import Path

import pandas as pd

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from quotation_engine.config import setup_logging
from quotation_engine.features import QuotationFeatureEngine


def main(argv=None):
    parser = argparse.ArgumentParser(description='Find potential quotations and compute their features')
    parser.add_argument('documents', help='CSV with doc_id and text columns')
    parser.add_argument('verses', help='CSV with verse_id, version and text columns')
    parser.add_argument('-o', '--output', required=True, help='CSV to write features to')
    parser.add_argument('--min-tokens', type=int, default=None, help='Override features.min_tokens')
    args = parser.parse_args(argv)

    setup_logging()

    documents = pd.read_csv(args.documents, dtype={'doc_id': str})
    verses = pd.read_csv(args.verses, dtype={'verse_id': str})
    print(f"Documents: {len(documents)}, verses: {len(verses)}")

    engine = QuotationFeatureEngine(min_tokens=args.min_tokens)
    features = engine.compute_features(documents, verses)

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    features.to_csv(output, index=False)
    print(f"Wrote {len(features)} potential quotations to {output}")


if __name__ == '__main__':
    main()
