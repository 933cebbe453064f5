"""Count words in one newspaper batch."""

import sys
import argparse
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from quotation_engine.batch import run_wordcount
from quotation_engine.config import setup_logging


def main(argv=None):
    parser = argparse.ArgumentParser(description='Compute word counts for a batch of newspaper pages')
    parser.add_argument('input', help='Feather file with doc_id and text columns')
    parser.add_argument('-o', '--output', required=True, help='Feather file to write doc_id and wordcount to')
    args = parser.parse_args(argv)

    setup_logging()
    counts = run_wordcount(args.input, args.output)
    print(f"Wrote word counts for {len(counts)} documents to {args.output}")


if __name__ == '__main__':
    main()
