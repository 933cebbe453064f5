"""SLURM array job script for the word-count batches."""

from pathlib import Path
from typing import List, Optional

from ..config import Config, get_config

DEFAULT_COMMAND = 'python scripts/run_wordcount_task.py --task-id "$SLURM_ARRAY_TASK_ID"'


def count_batches(batch_list: str) -> int:
    """
    Number of array tasks in the batch list.

    Blank lines at the end of the file are not tasks; blank lines between
    batches keep their line number.
    """
    path = Path(batch_list)
    if not path.exists():
        raise FileNotFoundError(f"Batch list not found: {path}")

    lines = path.read_text().splitlines()
    while lines and not lines[-1].strip():
        lines.pop()
    return len(lines)


def _is_set(value: Optional[str]) -> bool:
    return bool(value) and not str(value).startswith('${')


def render_sbatch_script(
    n_tasks: int,
    job_name: str = 'wordcount-batches',
    log_path: str = 'argo-out/logs/argo-wordcount-%A_%a.out',
    mail_type: Optional[str] = 'ALL',
    mail_user: Optional[str] = None,
    partition: Optional[str] = None,
    concurrency: int = 120,
    setup: Optional[List[str]] = None,
    command: str = DEFAULT_COMMAND
) -> str:
    """
    Build the batch script submitted with ``sbatch``.

    The environment is not exported to the tasks, so any module loads or
    virtualenv activation go in `setup`.
    """
    if n_tasks < 1:
        raise ValueError(f"Array job needs at least one task, got {n_tasks}")
    if concurrency < 1:
        raise ValueError(f"Concurrency cap must be positive, got {concurrency}")

    lines = [
        '#!/bin/bash',
        f'#SBATCH --job-name={job_name}',
        f'#SBATCH --output="{log_path}"',
    ]
    if _is_set(mail_type) and _is_set(mail_user):
        lines.append(f'#SBATCH --mail-type={mail_type}')
        lines.append(f'#SBATCH --mail-user={mail_user}')
    if _is_set(partition):
        lines.append(f'#SBATCH --partition={partition}')
    lines.append('#SBATCH --export=NONE')
    lines.append(f'#SBATCH --array=1-{n_tasks}%{concurrency}')
    lines.append('')

    if setup:
        lines.extend(setup)
        lines.append('')

    lines.append(command)
    return '\n'.join(lines) + '\n'


def sbatch_from_config(config: Optional[Config] = None) -> str:
    """Render the script with task count from the configured batch list."""
    config = config or get_config()
    n_tasks = count_batches(config.get('batch.batch_list', 'bin/chronam-batch-list.txt'))
    return render_sbatch_script(
        n_tasks,
        job_name=config.get('slurm.job_name', 'wordcount-batches'),
        log_path=config.get('slurm.log_path', 'argo-out/logs/argo-wordcount-%A_%a.out'),
        mail_type=config.get('slurm.mail_type', 'ALL'),
        mail_user=config.get('slurm.mail_user'),
        partition=config.get('slurm.partition'),
        concurrency=int(config.get('slurm.concurrency', 120)),
        setup=config.get('slurm.setup', []),
        command=config.get('slurm.command', DEFAULT_COMMAND),
    )
