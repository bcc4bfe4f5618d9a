"""
Service: one full scoring run over every configured table.
Usage: called by `backend.sentiment.main` (once, or on a schedule).
"""
from __future__ import annotations

import logging
from typing import Dict, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..core.config import Settings
from ..core.db import make_engine
from ..core.errors import DatastoreConnectionError
from ..engine.llm import ScoreClient
from .aggregate import ScoreAggregator
from .rows import RowProcessor, TableStats

logger = logging.getLogger(__name__)


def run(
    settings: Settings,
    engine: Optional[Engine] = None,
    client: Optional[ScoreClient] = None,
) -> Dict[str, TableStats]:
    """Score the generic tables in order, then the title+body table.

    Any datastore failure, including an unusable db.url, aborts the run with
    DatastoreConnectionError.
    """
    own_engine: Optional[Engine] = None
    own_client: Optional[ScoreClient] = None
    out: Dict[str, TableStats] = {}
    try:
        if engine is None:
            engine = own_engine = make_engine(settings.db)
        if client is None:
            client = own_client = ScoreClient(settings.llm, settings.prompt)
        aggregator = ScoreAggregator(
            client,
            samples=settings.llm.samples,
            abort_on_any_invalid_sample=settings.llm.abort_on_any_invalid_sample,
        )
        processor = RowProcessor(aggregator)
        with engine.connect() as conn:
            for name in settings.tables.generic:
                logger.info("Processing table %s", name)
                out[name] = processor.process_table(conn, name)
            if settings.tables.title_body:
                name = settings.tables.title_body
                logger.info("Processing table %s", name)
                out[name] = processor.process_title_body_table(conn, name)
    except SQLAlchemyError as e:
        raise DatastoreConnectionError(f"Datastore failure: {e}") from e
    finally:
        if own_client is not None:
            own_client.close()
        if own_engine is not None:
            own_engine.dispose()
    return out
