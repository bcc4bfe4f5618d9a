"""
Logging for the scoring job.
- Root logger writes to a size-rotated file and, optionally, stderr.
- Per-row lines ("Updating sentiment score for id ...") are INFO; raw LLM
  replies are DEBUG; per-row API failures are ERROR with traceback.
- Each completed run appends one JSON summary line to sentiment_runs.jsonl.
Env:
  LOG_LEVEL=DEBUG|INFO|WARNING|ERROR (default INFO)
  LOG_TO_CONSOLE=1|0 (default 1)
  LOG_DIR (default logs), LOG_FILE (default <LOG_DIR>/sentiment_scoring.log)
  LOG_MAX_BYTES (default 5000000), LOG_BACKUP_COUNT (default 3)
"""
from __future__ import annotations

from pathlib import Path
import json
import logging
import logging.handlers
import os

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s - %(message)s'
# chatty third-party loggers capped at WARNING
QUIET_LOGGERS = ('httpx', 'httpcore', 'apscheduler.executors.default')


def log_root() -> Path:
    return Path(os.getenv('LOG_DIR', 'logs')).resolve()


def write_jsonl(path: Path, record: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open('a', encoding='utf-8') as f:
        f.write(json.dumps(record) + '\n')


def _job_handlers(log_file: Path, to_console: bool) -> list[logging.Handler]:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handlers: list[logging.Handler] = [
        logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=int(os.getenv('LOG_MAX_BYTES', '5000000')),
            backupCount=int(os.getenv('LOG_BACKUP_COUNT', '3')),
            encoding='utf-8',
        )
    ]
    if to_console:
        handlers.append(logging.StreamHandler())
    return handlers


def setup_logging() -> None:
    level_name = os.getenv('LOG_LEVEL', 'INFO').upper()
    level = getattr(logging, level_name, logging.INFO)
    to_console = os.getenv('LOG_TO_CONSOLE', '1') == '1'
    log_file = Path(os.getenv('LOG_FILE') or str(log_root() / 'sentiment_scoring.log'))

    root = logging.getLogger()
    root.setLevel(level)
    # scheduled mode calls this once, but main() may be re-entered in tests
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(LOG_FORMAT)
    for handler in _job_handlers(log_file, to_console):
        handler.setFormatter(fmt)
        handler.setLevel(level)
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "Scoring job logging level=%s file=%s console=%s", level_name, log_file, to_console
    )
