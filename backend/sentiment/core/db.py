from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine, make_url

from .config import DatabaseConfig


def database_url(cfg: DatabaseConfig) -> URL:
    url = make_url(cfg.url)
    if cfg.user:
        url = url.set(username=cfg.user)
    if cfg.password:
        url = url.set(password=cfg.password)
    return url


def make_engine(cfg: DatabaseConfig) -> Engine:
    url = database_url(cfg)
    connect_args = {"check_same_thread": False} if url.get_backend_name() == "sqlite" else {}
    return create_engine(url, connect_args=connect_args)
