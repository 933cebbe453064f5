"""Run the word count for one SLURM array task."""

import os
import sys
import argparse
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from quotation_engine.batch import BatchJob, TaskStatus
from quotation_engine.config import setup_logging


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Word count for the batch on line TASK_ID of the batch list')
    parser.add_argument(
        '--task-id',
        type=int,
        default=os.getenv('SLURM_ARRAY_TASK_ID'),
        help='1-based line of the batch list (default: $SLURM_ARRAY_TASK_ID)'
    )
    parser.add_argument('--batch-list', help='Override batch.batch_list from the config')
    args = parser.parse_args(argv)

    if args.task_id is None:
        parser.error('--task-id is required outside a SLURM array job')

    setup_logging()
    job = BatchJob.from_config()
    if args.batch_list:
        job.batch_list = Path(args.batch_list)

    status = job.run_task(int(args.task_id))
    return 1 if status == TaskStatus.FAILED else 0


if __name__ == '__main__':
    sys.exit(main())
