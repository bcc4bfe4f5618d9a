"""
Service: score unscored rows of one table and write the result back.
- Generic tables (id, text, keyword): rows with sentiment_score NULL or 0.
- Title+body tables (id, title, text, keyword): rows with sentiment_score NULL
  or != PROCESSED_SENTINEL; title and body are scored separately and averaged.
- A transport failure on one row is logged and the scan continues.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Optional

from sqlalchemy import column, or_, table, update, select
from sqlalchemy.engine import Connection

from ..core.errors import TransportError
from .aggregate import ScoreAggregator

logger = logging.getLogger(__name__)

PROCESSED_SENTINEL = -1


@dataclass(frozen=True)
class ScorableItem:
    id: str
    text: str
    keyword: str
    secondary_text: Optional[str] = None

    @property
    def eligible(self) -> bool:
        if not _present(self.keyword):
            return False
        return _present(self.text) or _present(self.secondary_text)


@dataclass
class TableStats:
    selected: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


def _present(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def _generic_table(name: str):
    return table(name, column("id"), column("text"), column("keyword"), column("sentiment_score"))


def _title_body_table(name: str):
    return table(name, column("id"), column("title"), column("text"), column("keyword"), column("sentiment_score"))


class RowProcessor:
    def __init__(self, aggregator: ScoreAggregator) -> None:
        self.aggregator = aggregator

    def _persist(self, conn: Connection, table_name: str, item_id: str, score: int) -> None:
        t = table(table_name, column("id"), column("sentiment_score"))
        result = conn.execute(update(t).where(t.c.id == item_id).values(sentiment_score=score))
        conn.commit()
        if result.rowcount != 1:
            logger.warning("Update of %s id=%s affected %s rows", table_name, item_id, result.rowcount)

    def _score_item(self, item: ScorableItem) -> int:
        if not _present(item.secondary_text):
            return self.aggregator.average_score(item.text, item.keyword)
        # a blank title is still scored as its own field
        return self.aggregator.average_two_fields(item.text, item.secondary_text, item.keyword)

    def _process_items(self, conn: Connection, table_name: str, items: list[ScorableItem]) -> TableStats:
        stats = TableStats(selected=len(items))
        for item in items:
            if not item.eligible:
                stats.skipped += 1
                continue
            try:
                score = self._score_item(item)
            except TransportError:
                logger.exception("Error calling sentiment analysis API for %s ID: %s", table_name, item.id)
                stats.failed += 1
                continue
            logger.info(
                "Updating sentiment score for id: %s, keyword: %s, score: %s", item.id, item.keyword, score
            )
            self._persist(conn, table_name, item.id, score)
            stats.updated += 1
        logger.info("Finished %s: %s", table_name, stats.as_dict())
        return stats

    def process_table(self, conn: Connection, table_name: str) -> TableStats:
        t = _generic_table(table_name)
        q = select(t.c.id, t.c.text, t.c.keyword).where(
            or_(t.c.sentiment_score.is_(None), t.c.sentiment_score == 0)
        )
        rows = conn.execute(q).mappings().all()
        # Generic rows need both text and keyword; there is no fallback field.
        items = [
            ScorableItem(id=str(r["id"]), text=r["text"] or "", keyword=r["keyword"] or "")
            for r in rows
        ]
        return self._process_items(conn, table_name, items)

    def process_title_body_table(self, conn: Connection, table_name: str) -> TableStats:
        t = _title_body_table(table_name)
        # NOTE: selects everything not marked PROCESSED_SENTINEL, unlike the generic
        # tables' NULL-or-0 rule; scores never equal the sentinel, so rows are rescored each run.
        q = select(t.c.id, t.c.title, t.c.text, t.c.keyword).where(
            or_(t.c.sentiment_score.is_(None), t.c.sentiment_score != PROCESSED_SENTINEL)
        )
        rows = conn.execute(q).mappings().all()
        items = [
            ScorableItem(
                id=str(r["id"]),
                text=r["title"] or "",
                keyword=r["keyword"] or "",
                secondary_text=r["text"],
            )
            for r in rows
        ]
        return self._process_items(conn, table_name, items)
