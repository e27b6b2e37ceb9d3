"""
Tests for the lexiread command-line interface.
"""

from datetime import datetime, timezone

import pytest

from lexiread.cli import main
from lexiread.clock import utc_now
from lexiread.session_log import QuizSessionRecord
from lexiread.srs import SqlStore, SRSRecord, compute_next_record, default_record


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'cli.db'}"


@pytest.fixture
def cli_store(db_url):
    store = SqlStore.from_url(db_url)
    yield store
    store.engine.dispose()


def run(db_url, *args):
    return main(["--database-url", db_url, "--log-level", "WARNING", *args])


class TestCli:

    def test_init_db(self, db_url, capsys):
        assert run(db_url, "init-db") == 0
        assert "Database ready" in capsys.readouterr().out

    def test_due_lists_due_items(self, db_url, cli_store, capsys):
        cli_store.put_record("w-new", default_record("w-new"))
        cli_store.put_record("w-later", SRSRecord(
            item_id="w-later",
            interval=6,
            repetitions=2,
            last_review_date=datetime(2999, 1, 1, tzinfo=timezone.utc),
            next_review_date=datetime(2999, 1, 7, tzinfo=timezone.utc),
        ))

        assert run(db_url, "due") == 0
        out = capsys.readouterr().out
        assert "1 item(s) due" in out
        assert "w-new" in out
        assert "w-later" not in out

    def test_due_nothing(self, db_url, capsys):
        assert run(db_url, "due", "--limit", "5") == 0
        assert "Nothing due" in capsys.readouterr().out

    def test_forecast(self, db_url, cli_store, capsys):
        cli_store.put_record("w1", default_record("w1"))

        assert run(db_url, "forecast", "--days", "3") == 0
        out = capsys.readouterr().out
        assert "Review forecast (3 days)" in out
        assert "Familiarity" in out
        assert "Overdue: 0" in out

    def test_stats(self, db_url, cli_store, capsys):
        cli_store.append_session(QuizSessionRecord(
            timestamp=utc_now(),
            mode="flashcard",
            total_items=1,
            first_attempt_correct=1,
            duration_seconds=90,
        ))

        assert run(db_url, "stats", "--window", "7") == 0
        out = capsys.readouterr().out
        assert "Current streak:  1 day(s)" in out
        assert "1m over 1 session(s)" in out

    def test_reset(self, db_url, cli_store, capsys):
        cli_store.put_record("w1", compute_next_record(default_record("w1"), 5, utc_now()))

        assert run(db_url, "reset", "w1") == 0
        assert cli_store.get_record("w1") == default_record("w1")

    def test_reset_db_requires_confirmation(self, db_url, cli_store, monkeypatch, capsys):
        cli_store.put_record("w1", default_record("w1"))
        monkeypatch.setattr("builtins.input", lambda prompt: "no")

        assert run(db_url, "init-db", "--reset") == 1
        assert len(cli_store.list_records()) == 1

    def test_reset_db_confirmed(self, db_url, cli_store):
        cli_store.put_record("w1", default_record("w1"))

        assert run(db_url, "init-db", "--reset", "--yes") == 0
        assert cli_store.list_records() == []

    def test_command_required(self):
        with pytest.raises(SystemExit):
            main([])
