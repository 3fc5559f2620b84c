"""Logging setup for the publishing CLI and other league jobs."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

# Substitution decisions are logged at debug level; the audit file keeps them
AUDIT_LEVEL = logging.DEBUG


def audit_log_path(log_dir: Path, job: str, week: Optional[int] = None) -> Path:
    """
    Build the audit log file path for a job run.

    Example:
        audit_log_path(Path('data/logs'), 'publish', week=3)
        # data/logs/publish_week3_20261018_120000.log
    """
    stamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    prefix = f'{job}_week{week}' if week is not None else job
    return log_dir / f'{prefix}_{stamp}.log'


def setup_logging(
    log_dir: Optional[Path] = None,
    job: str = 'rlfantasy',
    week: Optional[int] = None,
    console_level: int = logging.INFO,
    log_to_file: bool = True,
) -> logging.Logger:
    """
    Configure the 'rlfantasy' logger for a job run.

    The console follows console_level. When log_to_file is set, an audit file
    under log_dir records everything down to debug level, including each
    substitute that filled an active slot, so a published week can be traced
    back to the stats it was computed from.

    Args:
        log_dir: Directory for audit logs (default: ./logs)
        job: Job name used as the log file prefix
        week: Week the job works on, added to the file name
        console_level: Console logging level (default: INFO)
        log_to_file: Whether to write the audit file (default: True)

    Returns:
        Configured logger instance

    Example:
        from rlfantasy.logging_config import setup_logging
        logger = setup_logging(Path('data/logs'), job='publish', week=3)
        logger.info("Publishing week 3")
    """
    logger = logging.getLogger('rlfantasy')
    logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    logger.addHandler(console_handler)

    if log_to_file:
        log_dir = log_dir or Path('logs')
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(audit_log_path(log_dir, job, week))
        file_handler.setLevel(AUDIT_LEVEL)
        file_handler.setFormatter(
            logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S',
            )
        )
        logger.addHandler(file_handler)
        logger.setLevel(min(AUDIT_LEVEL, console_level))
    else:
        logger.setLevel(console_level)

    return logger
