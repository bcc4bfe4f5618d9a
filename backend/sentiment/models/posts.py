from __future__ import annotations

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class _KeywordPost:
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    text: Mapped[str | None] = mapped_column(Text, nullable=True)
    keyword: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    sentiment_score: Mapped[int | None] = mapped_column(Integer, nullable=True)


class XPost(_KeywordPost, Base):
    __tablename__ = "x_posts"


class InstagramPost(_KeywordPost, Base):
    __tablename__ = "instagram_posts"


class YoutubeComment(_KeywordPost, Base):
    __tablename__ = "youtube_comments"


class RedditPost(_KeywordPost, Base):
    __tablename__ = "reddit_posts"

    title: Mapped[str | None] = mapped_column(String(512), nullable=True)  # body lives in `text`
