import json

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from backend.sentiment import main as main_mod
from backend.sentiment.core.errors import DatastoreConnectionError
from backend.sentiment.models import InstagramPost, RedditPost, XPost, YoutubeComment
from backend.sentiment.services.pipeline import run


def test_end_to_end_persists_average(engine, settings, make_client):
    with Session(engine) as s:
        s.add_all([
            XPost(id="x1", text="best launch ever", keyword="rocket", sentiment_score=0),
            InstagramPost(id="i1", text="", keyword="rocket"),
            YoutubeComment(id="y1", text="so good", keyword="rocket", sentiment_score=None),
            RedditPost(id="r1", title="Launch thread", text="It flew!", keyword="rocket"),
        ])
        s.commit()
    client, llm = make_client(lambda p: 'Here you go: {"positivity_score": 80}')

    stats = run(settings, engine=engine, client=client)

    assert list(stats) == ["x_posts", "instagram_posts", "youtube_comments", "reddit_posts"]
    assert stats["instagram_posts"].skipped == 1
    with Session(engine) as s:
        assert s.get(XPost, "x1").sentiment_score == 80
        assert s.get(InstagramPost, "i1").sentiment_score is None
        assert s.get(YoutubeComment, "y1").sentiment_score == 80
        assert s.get(RedditPost, "r1").sentiment_score == 80
    # 3 calls each for x1, y1 and 6 for the title+body row
    assert len(llm.prompts) == 12
    assert llm.prompts[0] == "Rate sentiment toward rocket: best launch ever"


def test_unreachable_datastore_is_fatal(settings, make_client, tmp_path):
    bad = settings.model_copy(update={
        "db": settings.db.model_copy(update={"url": f"sqlite:///{tmp_path}/missing/dir/app.db"})
    })
    client, llm = make_client(lambda p: '{"positivity_score": 1}')
    with pytest.raises(DatastoreConnectionError) as ei:
        run(bad, client=client)
    assert ei.value.fatal
    assert llm.prompts == []


def test_missing_table_aborts_run(settings, make_client):
    empty = create_engine("sqlite://", poolclass=StaticPool, connect_args={"check_same_thread": False})
    client, _ = make_client(lambda p: '{"positivity_score": 1}')
    with pytest.raises(DatastoreConnectionError):
        run(settings, engine=empty, client=client)
    empty.dispose()


def test_main_returns_2_without_config(tmp_path, monkeypatch):
    monkeypatch.setattr(main_mod, "setup_logging", lambda: None)
    monkeypatch.setenv("SENTIMENT_CONFIG", str(tmp_path / "missing.yaml"))
    assert main_mod.main() == 2


def _config(tmp_path, db_url):
    p = tmp_path / "cfg.yaml"
    p.write_text(
        f'db:\n  url: "{db_url}"\nllm:\n  url: "http://127.0.0.1:9/generate"\nprompt: "{{keyword}} {{text}}"\n',
        encoding="utf-8",
    )
    return p


def test_main_returns_1_on_datastore_failure(tmp_path, monkeypatch):
    monkeypatch.setattr(main_mod, "setup_logging", lambda: None)
    monkeypatch.setenv("SENTIMENT_CONFIG", str(_config(tmp_path, f"sqlite:///{tmp_path}/no/such/dir.db")))
    assert main_mod.main() == 1


def test_main_writes_run_summary(tmp_path, monkeypatch):
    from backend.sentiment.models import Base

    db_path = tmp_path / "app.db"
    eng = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(eng)
    eng.dispose()
    monkeypatch.setattr(main_mod, "setup_logging", lambda: None)
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("SENTIMENT_CONFIG", str(_config(tmp_path, f"sqlite:///{db_path}")))

    assert main_mod.main() == 0

    lines = (tmp_path / "logs" / "sentiment_runs.jsonl").read_text(encoding="utf-8").splitlines()
    record = json.loads(lines[-1])
    assert record["tables"]["x_posts"] == {"selected": 0, "updated": 0, "skipped": 0, "failed": 0}
    assert "reddit_posts" in record["tables"]
    assert record["started"].endswith("+00:00")
    assert record["finished"].endswith("+00:00")


def test_main_uses_scheduler_when_interval_set(tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(main_mod, "setup_logging", lambda: None)
    monkeypatch.setattr(main_mod, "run_forever", lambda settings, job: calls.append((settings, job)))
    monkeypatch.setenv("SCORE_INTERVAL_MINUTES", "10")
    monkeypatch.setenv("SENTIMENT_CONFIG", str(_config(tmp_path, "sqlite://")))
    assert main_mod.main() == 0
    assert calls[0][0].schedule.interval_minutes == 10
    assert calls[0][1] is main_mod.run_once


@pytest.mark.parametrize("url", ["not a url", "nosuchdialect://host/db"])
def test_unusable_db_url_is_fatal(settings, url):
    bad = settings.model_copy(update={"db": settings.db.model_copy(update={"url": url})})
    with pytest.raises(DatastoreConnectionError):
        run(bad)


def test_main_returns_1_on_unusable_db_url(tmp_path, monkeypatch):
    monkeypatch.setattr(main_mod, "setup_logging", lambda: None)
    monkeypatch.setenv("SENTIMENT_CONFIG", str(_config(tmp_path, "not a url")))
    assert main_mod.main() == 1
