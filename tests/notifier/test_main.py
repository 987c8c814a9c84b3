"""Tests for the poll loop orchestrator."""

import logging
import threading
from unittest.mock import Mock

import pytest

from notifier.errors import FetchError, NotificationError
from notifier.main import PollLoop
from notifier.models import Commit, RepoConfig
from notifier.repository import Repository
from notifier.throttle import Throttle
from notifier.transport import Transport
from notifier.workspace import Workspace


class RecordingTransport(Transport):
    """Transport that remembers what it was asked to send."""

    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    def send(self, title, body):
        if self.fail:
            raise NotificationError("display unavailable")
        self.sent.append((title, body))


class FakeRepository:
    """Stands in for Repository with scripted poll results."""

    def __init__(self, url, batches, on_poll=None):
        self.config = RepoConfig(url, "/commit/", "main")
        self.url = url
        self.batches = list(batches)
        self.on_poll = on_poll
        self.local_path = None
        self.calls = []

    def is_cloned(self):
        return self.local_path is not None

    def ensure_cloned(self, destination_path, history_depth):
        self.calls.append(("clone", destination_path, history_depth))
        self.local_path = destination_path

    def refresh(self):
        self.calls.append(("refresh",))

    def poll_new_commits(self):
        self.calls.append(("poll",))
        if self.on_poll:
            self.on_poll()
        return self.batches.pop(0)


def commits(*names):
    return [Commit(hash=f"{name}-hash", subject=name) for name in names]


@pytest.fixture
def workspace(tmp_path):
    with Workspace(tmp_path) as ws:
        yield ws


def make_loop(repositories, workspace, transport=None, budget=10, stop_event=None):
    return PollLoop(
        repositories,
        Throttle(window_length=3600, budget_capacity=budget),
        transport or RecordingTransport(),
        workspace,
        history_depth=25,
        poll_interval=0,
        stop_event=stop_event,
    )


class TestRunCycle:
    """Tests for a single poll cycle."""

    def test_clones_then_refreshes(self, workspace):
        """Test the not-cloned to cloned transition across cycles."""
        repo = FakeRepository("https://example.com/a", [[], []])
        loop = make_loop([repo], workspace)

        loop.run_cycle()
        loop.run_cycle()

        assert repo.calls[0] == ("clone", workspace.root / "git-notifier" / "0", 25)
        assert repo.calls[1:] == [("poll",), ("refresh",), ("poll",)]

    def test_each_repository_gets_its_own_path(self, workspace):
        """Test that clone destinations are not shared."""
        first = FakeRepository("https://example.com/a", [[]])
        second = FakeRepository("https://example.com/b", [[]])

        make_loop([first, second], workspace).run_cycle()

        assert first.local_path != second.local_path

    def test_returns_counts_in_configuration_order(self, workspace):
        """Test per-repository commit counts."""
        first = FakeRepository("https://example.com/a", [commits("x", "y")])
        second = FakeRepository("https://example.com/b", [[]])

        counts = make_loop([first, second], workspace).run_cycle()

        assert list(counts.items()) == [("https://example.com/a", 2), ("https://example.com/b", 0)]

    def test_notifications_in_commit_order(self, workspace):
        """Test one notification per commit, titled with the repository url."""
        transport = RecordingTransport()
        repo = FakeRepository("https://example.com/a", [commits("old", "new")])

        make_loop([repo], workspace, transport).run_cycle()

        assert [title for title, _ in transport.sent] == ["https://example.com/a"] * 2
        assert transport.sent[0][1] == (
            'old <a href="https://example.com/a/commit/old-hash">commit link</a>'
        )
        assert transport.sent[1][1].startswith("new ")

    def test_throttle_limits_notifications_not_output(self, workspace, capsys):
        """Test denied notifications are still printed to the console."""
        transport = RecordingTransport()
        repo = FakeRepository("https://example.com/a", [commits("c1", "c2", "c3", "c4")])

        make_loop([repo], workspace, transport, budget=2).run_cycle()

        assert len(transport.sent) == 2
        out = capsys.readouterr().out
        for name in ("c1", "c2", "c3", "c4"):
            assert f"https://example.com/a/commit/{name}-hash" in out

    def test_throttle_shared_across_repositories(self, workspace):
        """Test that one budget covers all repositories."""
        transport = RecordingTransport()
        first = FakeRepository("https://example.com/a", [commits("a1", "a2")])
        second = FakeRepository("https://example.com/b", [commits("b1", "b2")])

        make_loop([first, second], workspace, transport, budget=3).run_cycle()

        assert [title for title, _ in transport.sent] == [
            "https://example.com/a",
            "https://example.com/a",
            "https://example.com/b",
        ]

    def test_transport_failure_is_logged(self, workspace, caplog):
        """Test that an undeliverable notification does not stop the cycle."""
        repo = FakeRepository("https://example.com/a", [commits("x", "y")])
        loop = make_loop([repo], workspace, RecordingTransport(fail=True))

        with caplog.at_level(logging.WARNING):
            counts = loop.run_cycle()

        assert counts == {"https://example.com/a": 2}
        assert "display unavailable" in caplog.text

    def test_repository_failure_propagates(self, workspace):
        """Test that lifecycle errors end the cycle."""
        failing = FakeRepository("https://example.com/a", [[], []])
        failing.refresh = Mock(side_effect=FetchError("fetch failed"))
        after = FakeRepository("https://example.com/b", [[], []])
        loop = make_loop([failing, after], workspace)
        loop.run_cycle()

        with pytest.raises(FetchError):
            loop.run_cycle()

        assert ("refresh",) not in after.calls

    def test_stop_between_repositories(self, workspace):
        """Test that a stop request skips the remaining repositories."""
        stop = threading.Event()
        first = FakeRepository("https://example.com/a", [[]], on_poll=stop.set)
        second = FakeRepository("https://example.com/b", [[]])

        counts = make_loop([first, second], workspace, stop_event=stop).run_cycle()

        assert counts == {"https://example.com/a": 0}
        assert second.calls == []


class TestRun:
    """Tests for the repeating loop."""

    def test_stops_when_event_set(self, workspace):
        """Test that run returns once the stop event is set."""
        stop = threading.Event()
        polls = []

        def poll_hook():
            polls.append(1)
            if len(polls) == 3:
                stop.set()

        repo = FakeRepository("https://example.com/a", [[], [], []], on_poll=poll_hook)
        make_loop([repo], workspace, stop_event=stop).run()

        assert len(polls) == 3

    def test_preset_event_skips_polling(self, workspace):
        """Test that no cycle runs when already stopped."""
        stop = threading.Event()
        stop.set()
        repo = FakeRepository("https://example.com/a", [])

        make_loop([repo], workspace, stop_event=stop).run()

        assert repo.calls == []

    def test_end_to_end_with_git(self, upstream, workspace):
        """Test two cycles against a real upstream repository."""
        upstream.commits("one", "two")
        repo = Repository(RepoConfig(upstream.url, "/commit/", "main"))
        transport = RecordingTransport()
        loop = make_loop([repo], workspace, transport)

        assert loop.run_cycle() == {upstream.url: 2}
        upstream.commit("three")
        assert loop.run_cycle() == {upstream.url: 1}

        assert [body.split(" <a")[0] for _, body in transport.sent] == ["one", "two", "three"]
