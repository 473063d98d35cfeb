"""
Tests for the command-line backfill: exit codes and Ctrl+C handling
"""
import json
import threading
import pytest
from contextlib import contextmanager
from types import SimpleNamespace

from conftest import MappingTranslator, fetch_movies
from core.errors import BackfillConfigError
from scripts import run_backfill


class FakeClient:
    """Stands in for TranslationClient; `gate` can hold the first translation back"""

    instances = []

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.mapping = MappingTranslator({"电影A": "MovieA", "电影B": "MovieB"})
        self.entered = threading.Event()
        self.gate = threading.Event()
        self.gate.set()
        self.closed = False
        FakeClient.instances.append(self)

    def translate(self, text):
        self.entered.set()
        self.gate.wait(timeout=5)
        return self.mapping(text)

    def close(self):
        self.closed = True


@pytest.fixture
def cli(test_db, monkeypatch):
    """main() wired to the test session and a fake translation client"""
    @contextmanager
    def fake_db_context():
        yield test_db
        test_db.commit()

    monkeypatch.setattr(run_backfill, "get_db_context", fake_db_context)
    monkeypatch.setattr(run_backfill, "TranslationClient", FakeClient)
    FakeClient.instances = []
    return run_backfill


class TestMain:

    def test_successful_run_exits_zero(self, cli, test_db, seed_movies, capsys):
        seed_movies([("电影A", 0), ("电影B", 0)])

        assert cli.main(["--api-url", "http://translator.local/translate"]) == 0

        out = capsys.readouterr().out
        assert "Scan complete, translated: 2, failed: 0" in out
        assert [row["name"] for row in fetch_movies(test_db)] == ["MovieA", "MovieB"]
        assert FakeClient.instances[0].kwargs["api_url"] == "http://translator.local/translate"
        assert FakeClient.instances[0].closed is True

    def test_failed_run_exits_one(self, cli, tmp_path, capsys):
        path = tmp_path / "targets.json"
        path.write_text(json.dumps([{"table_name": "mac_missing"}]))

        assert cli.main(["--targets-file", str(path)]) == 1

        assert "Backfill failed" in capsys.readouterr().out
        assert FakeClient.instances[0].closed is True

    def test_unknown_table_raises_config_error(self, cli):
        with pytest.raises(BackfillConfigError, match="mac_other"):
            cli.main(["--table", "mac_other"])

    def test_ctrl_c_stops_after_current_batch(self, cli, test_db, seed_movies, monkeypatch, capsys):
        from core.config import settings
        monkeypatch.setattr(settings, "BACKFILL_BATCH_SIZE", 1)
        seed_movies([("电影A", 0), ("电影B", 0)])

        class InterruptedThread(threading.Thread):
            """First timed join raises KeyboardInterrupt once a translation is in flight"""

            def join(self, timeout=None):
                client = FakeClient.instances[0]
                if timeout is not None:
                    client.entered.wait(timeout=5)
                    raise KeyboardInterrupt
                client.gate.set()
                super().join()

        original_init = FakeClient.__init__

        def held_init(self, **kwargs):
            original_init(self, **kwargs)
            self.gate.clear()

        monkeypatch.setattr(FakeClient, "__init__", held_init)
        monkeypatch.setattr(run_backfill, "threading", SimpleNamespace(
            Thread=InterruptedThread, Event=threading.Event,
        ))

        assert cli.main([]) == 0

        out = capsys.readouterr().out
        assert "Stopping after the current batch" in out
        assert "stopped early" in out
        assert [row["translated"] for row in fetch_movies(test_db)] == [1, 0]


class TestWaitForWorker:

    def test_finished_worker_is_not_interrupted(self):
        worker = threading.Thread(target=lambda: None)
        worker.start()
        cancel_event = threading.Event()

        assert run_backfill.wait_for_worker(worker, cancel_event) is False
        assert not cancel_event.is_set()

    def test_keyboard_interrupt_sets_cancel_event(self, capsys):
        class Worker:
            def __init__(self):
                self.joins = []

            def is_alive(self):
                return True

            def join(self, timeout=None):
                self.joins.append(timeout)
                if timeout is not None:
                    raise KeyboardInterrupt

        worker = Worker()
        cancel_event = threading.Event()

        assert run_backfill.wait_for_worker(worker, cancel_event) is True
        assert cancel_event.is_set()
        assert worker.joins == [0.5, None]
        assert "Stopping after the current batch" in capsys.readouterr().out
