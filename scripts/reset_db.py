#!/usr/bin/env python3
"""
Reset the scoring tables (DANGER): drops x_posts, instagram_posts,
youtube_comments and reddit_posts and recreates them empty.
Usage:
  SENTIMENT_CONFIG=configs/sentiment_config.yaml python scripts/reset_db.py

Notes:
- Meant for local SQLite development; production tables are owned by the harvesters.
"""
from __future__ import annotations

from backend.sentiment.core.config import load_settings
from backend.sentiment.core.db import make_engine
from backend.sentiment.models import Base


def main() -> None:
    engine = make_engine(load_settings().db)
    print("Dropping scoring tables...")
    Base.metadata.drop_all(bind=engine)
    print("Creating scoring tables...")
    Base.metadata.create_all(bind=engine)
    engine.dispose()
    print("Done.")


if __name__ == "__main__":
    main()
