"""Tests for habit streak calculations.

Covers the optimistic handling of today, scheduled (non-daily) habits that
skip unscheduled days, the look-back bound and streaks read back through the
repository.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta

from habitflow.services.habits import (
    MAX_LOOKBACK_DAYS,
    best_streak,
    compute_streaks,
    current_streak,
    habits_due_on,
    is_completed_today,
    refresh_streaks,
)
from tests.conftest import TODAY, USER_ID, days_ago

MWF = ["monday", "wednesday", "friday"]
THURSDAY = date(2024, 6, 13)


class TestCurrentStreakDaily:
    """Daily habits (no selected days)."""

    def test_no_completions_returns_zero(self):
        assert current_streak([], as_of=TODAY) == 0

    def test_single_completion_today_returns_one(self):
        assert current_streak([days_ago(0)], as_of=TODAY) == 1

    def test_single_completion_yesterday_returns_one(self):
        assert current_streak([days_ago(1)], as_of=TODAY) == 1

    def test_single_completion_two_days_ago_returns_zero(self):
        assert current_streak([days_ago(2)], as_of=TODAY) == 0

    def test_consecutive_days_ending_today(self):
        completions = [days_ago(i) for i in range(7)]
        assert current_streak(completions, as_of=TODAY) == 7

    def test_gap_breaks_streak(self):
        completions = [days_ago(0), days_ago(1), days_ago(3), days_ago(4)]
        assert current_streak(completions, as_of=TODAY) == 2

    def test_incomplete_today_is_not_penalized(self):
        """Five days up to yesterday still count while today is open."""
        completions = [days_ago(i) for i in range(1, 6)]
        assert current_streak(completions, as_of=TODAY) == 5

    def test_order_and_duplicates_do_not_matter(self):
        completions = [days_ago(2), days_ago(0), days_ago(1), days_ago(1)]
        assert current_streak(completions, as_of=TODAY) == 3

    def test_future_completions_are_ignored(self):
        completions = [days_ago(-1), days_ago(1), days_ago(2)]
        assert current_streak(completions, as_of=TODAY) == 2

    def test_malformed_dates_are_skipped(self, caplog):
        with caplog.at_level(logging.WARNING, logger="habitflow"):
            assert current_streak(["not-a-date", days_ago(1)], as_of=TODAY) == 1
        assert "Skipping malformed completion date" in caplog.text

    def test_walk_is_bounded_to_one_year(self):
        completions = [days_ago(i) for i in range(0, 500)]
        assert current_streak(completions, as_of=TODAY) == MAX_LOOKBACK_DAYS
        assert best_streak(completions) == 500

    def test_as_of_accepts_iso_string(self):
        assert current_streak(["2024-01-01", "2024-01-02"], as_of="2024-01-03") == 2


class TestCurrentStreakScheduled:
    """Habits with selected weekdays skip unscheduled days."""

    def test_three_scheduled_days_before_today(self):
        """Thursday is unscheduled and open; Wed, Mon and Fri form the run."""
        completions = ["2024-06-12", "2024-06-10", "2024-06-07"]
        assert current_streak(completions, MWF, as_of=THURSDAY) == 3

    def test_missing_scheduled_day_stops_the_run(self):
        completions = ["2024-06-12", "2024-06-07"]
        assert current_streak(completions, MWF, as_of=THURSDAY) == 1

    def test_scheduled_today_incomplete_is_skipped(self):
        """Wednesday is scheduled but not done yet; Mon and Fri still count."""
        completions = ["2024-06-10", "2024-06-07"]
        assert current_streak(completions, MWF, as_of=TODAY) == 2

    def test_scheduled_today_complete_counts(self):
        completions = ["2024-06-12", "2024-06-10", "2024-06-07"]
        assert current_streak(completions, MWF, as_of=TODAY) == 3

    def test_completion_on_unscheduled_today_is_not_counted(self):
        completions = ["2024-06-13", "2024-06-12"]
        assert current_streak(completions, MWF, as_of=THURSDAY) == 1

    def test_unscheduled_completions_do_not_extend_the_run(self):
        completions = ["2024-06-11", "2024-06-09"]  # Tuesday and Sunday
        assert current_streak(completions, MWF, as_of=TODAY) == 0

    def test_weekly_habit_spans_many_weeks(self):
        mondays = [(date(2024, 6, 10) - timedelta(weeks=i)).isoformat() for i in range(10)]
        assert current_streak(mondays, ["monday"], as_of=TODAY) == 10


class TestBestStreak:
    def test_no_completions_returns_zero(self):
        assert best_streak([]) == 0
        assert best_streak([], MWF) == 0

    def test_single_completion_returns_one(self):
        assert best_streak(["2024-01-01"]) == 1

    def test_three_consecutive_days_beat_an_isolated_day(self):
        completions = ["2024-01-01", "2024-01-02", "2024-01-03", "2024-01-10"]
        assert best_streak(completions) == 3

    def test_multiple_runs_return_longest(self):
        completions = (
            [(date(2024, 1, 1) + timedelta(days=i)).isoformat() for i in range(3)]
            + [(date(2024, 1, 10) + timedelta(days=i)).isoformat() for i in range(7)]
            + [(date(2024, 1, 20) + timedelta(days=i)).isoformat() for i in range(4)]
        )
        assert best_streak(completions) == 7

    def test_duplicates_do_not_reset_a_run(self):
        assert best_streak(["2024-01-01", "2024-01-01", "2024-01-02"]) == 2

    def test_month_boundary_is_consecutive(self):
        assert best_streak(["2024-02-28", "2024-02-29", "2024-03-01"]) == 3

    def test_scheduled_run_skips_weekend(self):
        completions = ["2024-06-03", "2024-06-05", "2024-06-07", "2024-06-10"]
        assert best_streak(completions, MWF) == 4

    def test_unscheduled_completions_are_ignored(self):
        completions = ["2024-06-03", "2024-06-04", "2024-06-05", "2024-06-07", "2024-06-10"]
        assert best_streak(completions, MWF) == 4

    def test_missed_scheduled_day_splits_runs(self):
        completions = ["2024-06-03", "2024-06-07", "2024-06-10"]
        assert best_streak(completions, MWF) == 2


class TestComputeStreaks:
    def test_returns_current_and_best(self):
        completions = ["2024-01-01", "2024-01-02", "2024-01-03", days_ago(1), days_ago(0)]
        assert compute_streaks(completions, today=TODAY) == (2, 3)

    def test_current_run_can_be_the_best(self):
        completions = ["2024-01-01", "2024-01-02"] + [days_ago(i) for i in range(14)]
        current, best = compute_streaks(completions, today=TODAY)
        assert current == best == 14

    def test_refresh_streaks_updates_cached_fields(self, snapshot_factory):
        habit = snapshot_factory(completions=[days_ago(0), days_ago(1)], current_streak=9, best_streak=9)
        refreshed = refresh_streaks(habit, today=TODAY)
        assert (refreshed.current_streak, refreshed.best_streak) == (2, 2)
        assert habit.current_streak == 9  # original snapshot untouched

    def test_refresh_is_idempotent(self, snapshot_factory):
        habit = snapshot_factory(completions=[days_ago(i) for i in (0, 1, 3)], selected_days=MWF)
        once = refresh_streaks(habit, today=TODAY)
        assert refresh_streaks(once, today=TODAY) == once


class TestTodayHelpers:
    def test_is_completed_today(self, snapshot_factory):
        assert is_completed_today(snapshot_factory(completions=[days_ago(0)]), today=TODAY)
        assert not is_completed_today(snapshot_factory(completions=[days_ago(1)]), today=TODAY)

    def test_habits_due_on_filters_by_schedule(self, snapshot_factory):
        daily = snapshot_factory(name="daily")
        mwf = snapshot_factory(name="mwf", selected_days=MWF)
        weekend = snapshot_factory(name="weekend", selected_days=["saturday", "sunday"])
        assert habits_due_on([daily, mwf, weekend], TODAY) == [daily, mwf]
        assert habits_due_on([daily, mwf, weekend], "2024-06-15") == [daily, weekend]


class TestStreaksThroughRepository:
    """Streaks recomputed from stored completions."""

    def test_new_habit_has_zero_streaks(self, repo, habit_factory):
        habit = habit_factory(name="Exercise")
        snapshot = repo.load_snapshot(habit.id, user_id=USER_ID, today=TODAY)
        assert (snapshot.current_streak, snapshot.best_streak) == (0, 0)

    def test_toggles_recompute_both_streaks(self, repo, habit_factory):
        habit = habit_factory(name="Meditation")
        for i in range(1, 4):
            repo.add_completion(habit.id, days_ago(i), user_id=USER_ID)

        snapshot = repo.load_snapshot(habit.id, user_id=USER_ID, today=TODAY)
        assert (snapshot.current_streak, snapshot.best_streak) == (3, 3)

        repo.toggle_completion(habit.id, TODAY, user_id=USER_ID)
        snapshot = repo.load_snapshot(habit.id, user_id=USER_ID, today=TODAY)
        assert (snapshot.current_streak, snapshot.best_streak) == (4, 4)

        repo.toggle_completion(habit.id, days_ago(2), user_id=USER_ID)
        snapshot = repo.load_snapshot(habit.id, user_id=USER_ID, today=TODAY)
        assert (snapshot.current_streak, snapshot.best_streak) == (2, 2)

    def test_scheduled_habit_streaks_from_storage(self, repo, habit_factory):
        habit = habit_factory(name="Gym", selected_days=MWF)
        for day in ("2024-06-03", "2024-06-05", "2024-06-07", "2024-06-10"):
            repo.add_completion(habit.id, day, user_id=USER_ID)

        snapshot = repo.load_snapshot(habit.id, user_id=USER_ID, today=TODAY)
        assert snapshot.selected_days == tuple(MWF)
        assert (snapshot.current_streak, snapshot.best_streak) == (4, 4)
