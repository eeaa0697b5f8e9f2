"""Tests for recurring reminder resets."""

import pytest

from remindme.core import recurrence
from remindme.core.timeutil import DAY_MS


HOUR_MS = 60 * 60 * 1000
NOW = 1_700_000_000_000


def _completed(repo, kind, completed_ago, due_date=None):
    reminder = repo.create_reminder("Water plants", recurring=kind, due_date=due_date)
    reminder.completed = True
    reminder.completed_at = NOW - completed_ago
    return reminder


class TestIntervals:
    def test_fixed_widths(self):
        assert recurrence.interval_for("daily") == DAY_MS
        assert recurrence.interval_for("weekly") == 7 * DAY_MS
        assert recurrence.interval_for("monthly") == 30 * DAY_MS

    def test_unknown_or_missing(self):
        assert recurrence.interval_for(None) is None
        assert recurrence.interval_for("yearly") is None


class TestSweep:
    def test_daily_reset_after_25_hours(self, repo):
        due = NOW - 20 * HOUR_MS
        reminder = _completed(repo, "daily", 25 * HOUR_MS, due_date=due)

        reset = repo.reset_recurring(now=NOW)

        assert reset == [reminder]
        assert reminder.completed is False
        assert reminder.completed_at is None
        assert reminder.created_at == NOW
        assert reminder.due_date == due + DAY_MS

    def test_not_reset_before_interval(self, repo):
        reminder = _completed(repo, "daily", 23 * HOUR_MS)
        assert repo.reset_recurring(now=NOW) == []
        assert reminder.completed is True

    def test_exact_interval_resets(self, repo):
        reminder = _completed(repo, "weekly", 7 * DAY_MS)
        repo.reset_recurring(now=NOW)
        assert reminder.completed is False

    def test_without_due_date_stays_undated(self, repo):
        reminder = _completed(repo, "monthly", 31 * DAY_MS)
        repo.reset_recurring(now=NOW)
        assert reminder.due_date is None

    def test_non_recurring_untouched(self, repo):
        reminder = repo.create_reminder("One-off")
        reminder.set_completed(True, NOW - 40 * DAY_MS)
        assert repo.reset_recurring(now=NOW) == []
        assert reminder.completed is True

    def test_incomplete_recurring_untouched(self, repo):
        reminder = repo.create_reminder("Daily standup", recurring="daily")
        assert repo.reset_recurring(now=NOW) == []
        assert reminder.completed is False

    def test_second_sweep_is_noop(self, repo):
        reminder = _completed(repo, "daily", 2 * DAY_MS, due_date=NOW)
        repo.reset_recurring(now=NOW)
        repo.reset_recurring(now=NOW)
        assert reminder.due_date == NOW + DAY_MS

    @pytest.mark.parametrize("resets,expected_saves", [(True, 1), (False, 0)])
    def test_notifies_only_when_something_reset(self, repo, resets, expected_saves):
        _completed(repo, "daily", 2 * DAY_MS if resets else HOUR_MS)
        saves = []
        repo.on_change = lambda: saves.append(1)

        repo.reset_recurring(now=NOW)

        assert len(saves) == expected_saves
