"""One scheduler array task: pick a batch, skip or run its word count."""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from .wordcount import run_wordcount
from ..config import Config, get_config

logger = logging.getLogger(__name__)

DEFAULT_INPUT_TEMPLATE = 'argo-out/chronam-df/{batch}.tar.bz2.feather'
DEFAULT_OUTPUT_TEMPLATE = 'argo-out/chronam-wordcounts/{batch}.wordcount.feather'


class TaskStatus(str, Enum):
    SKIPPED = 'SKIPPED'
    FINISHED = 'FINISHED'
    FAILED = 'FAILED'


class BatchJob:
    """Maps array task ids to batch files and runs them idempotently."""

    def __init__(
        self,
        batch_list: str,
        input_template: str = DEFAULT_INPUT_TEMPLATE,
        output_template: str = DEFAULT_OUTPUT_TEMPLATE
    ):
        """
        Args:
            batch_list: Text file with one batch name per line
            input_template: Input path with a {batch} placeholder
            output_template: Output path with a {batch} placeholder
        """
        self.batch_list = Path(batch_list)
        self.input_template = input_template
        self.output_template = output_template

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> 'BatchJob':
        config = config or get_config()
        return cls(
            config.get('batch.batch_list', 'bin/chronam-batch-list.txt'),
            config.get('batch.input_template', DEFAULT_INPUT_TEMPLATE),
            config.get('batch.output_template', DEFAULT_OUTPUT_TEMPLATE),
        )

    def resolve_batch(self, task_id: int) -> str:
        """Batch name on line `task_id` (1-based) of the batch list."""
        if not self.batch_list.exists():
            raise FileNotFoundError(f"Batch list not found: {self.batch_list}")

        lines = self.batch_list.read_text().splitlines()
        if not 1 <= task_id <= len(lines):
            raise ValueError(
                f"Task id {task_id} out of range for {len(lines)} batches in {self.batch_list}"
            )

        batch = lines[task_id - 1].strip()
        if not batch:
            raise ValueError(f"Line {task_id} of {self.batch_list} is empty")
        return batch

    def paths(self, batch: str) -> Tuple[Path, Path]:
        """Input and output paths for a batch."""
        return (
            Path(self.input_template.format(batch=batch)),
            Path(self.output_template.format(batch=batch)),
        )

    def run_task(self, task_id: int) -> TaskStatus:
        """
        Run the word count for one array task unless its output exists.

        A bad task id raises; a failure while counting is logged and
        reported as FAILED so the scheduler records the task as failed.
        """
        batch = self.resolve_batch(task_id)
        input_path, output_path = self.paths(batch)

        logger.info("Job details: BATCH=%s TASKID: %d", batch, task_id)
        logger.info("Input file is %s", input_path)

        if output_path.exists():
            logger.info("SKIPPED: Not running task because %s already exists", output_path)
            return TaskStatus.SKIPPED

        logger.info("RUNNING: Starting script to create %s", output_path)
        try:
            run_wordcount(input_path, output_path)
        except Exception as e:
            logger.error("FAILED: Could not create %s: %s", output_path, e)
            return TaskStatus.FAILED

        logger.info("FINISHED: Finished script to create %s", output_path)
        return TaskStatus.FINISHED
