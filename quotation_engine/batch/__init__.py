"""Word-count batch processing on a SLURM array."""

from .jobs import BatchJob, TaskStatus
from .slurm import count_batches, render_sbatch_script, sbatch_from_config
from .wordcount import compute_wordcounts, count_words, run_wordcount

__all__ = [
    'BatchJob',
    'TaskStatus',
    'count_batches',
    'render_sbatch_script',
    'sbatch_from_config',
    'compute_wordcounts',
    'count_words',
    'run_wordcount',
]
