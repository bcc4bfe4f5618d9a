"""
Sentiment scoring job entrypoint.
- Loads settings, scores every configured table, logs per-table stats.
- Exit status: 0 ok, 1 datastore failure, 2 configuration error.
Usage: python -m backend.sentiment.main   (or the `score-sentiment` script)
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict

from .core.config import Settings, load_settings
from .core.errors import ConfigError, DatastoreConnectionError
from .services.pipeline import run
from .services.rows import TableStats
from .services.scheduler import run_forever
from .utils.logging import log_root, setup_logging, write_jsonl

logger = logging.getLogger(__name__)


def run_once(settings: Settings) -> Dict[str, TableStats]:
    started = datetime.now(timezone.utc)
    stats = run(settings)
    for name, s in stats.items():
        logger.info("%s: %s", name, s.as_dict())
    write_jsonl(log_root() / 'sentiment_runs.jsonl', {
        "started": started.isoformat(),
        "finished": datetime.now(timezone.utc).isoformat(),
        "tables": {name: s.as_dict() for name, s in stats.items()},
    })
    return stats


def main() -> int:
    setup_logging()
    try:
        settings = load_settings()
    except ConfigError:
        logger.exception("Unable to load settings")
        return 2
    if settings.schedule.interval_minutes > 0:
        run_forever(settings, run_once)
        return 0
    try:
        run_once(settings)
    except DatastoreConnectionError:
        logger.exception("Sentiment scoring run aborted")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
