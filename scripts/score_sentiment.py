#!/usr/bin/env python3
"""
Score sentiment for unscored rows in x_posts, instagram_posts, youtube_comments
and reddit_posts, then exit (or keep running when an interval is configured).

Usage examples:
  SENTIMENT_CONFIG=configs/sentiment_config.yaml python scripts/score_sentiment.py
  SCORE_INTERVAL_MINUTES=30 LOG_LEVEL=DEBUG python scripts/score_sentiment.py

Notes:
- Ensure venv and PYTHONPATH are set, e.g., export PYTHONPATH=./
- DEBUG logging prints every raw reply from the scoring endpoint.
"""
from __future__ import annotations

from backend.sentiment.main import main


if __name__ == "__main__":
    raise SystemExit(main())
