"""Write the SLURM array job script for the word-count batches."""

import sys
import argparse
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from quotation_engine.batch import sbatch_from_config
from quotation_engine.config import get_config


def main(argv=None):
    config = get_config()

    parser = argparse.ArgumentParser(description='Render the sbatch script from config')
    parser.add_argument(
        '-o', '--output',
        default=config.get('slurm.script_path', 'bin/wordcount-batches.sh'),
        help='Where to write the script'
    )
    args = parser.parse_args(argv)

    script = sbatch_from_config(config)

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(script)
    output.chmod(0o755)

    print(f"Wrote {output}")
    print(f"Submit with: sbatch {output}")


if __name__ == '__main__':
    main()
