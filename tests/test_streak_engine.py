"""Tests for StreakEngine reconciliation.

Every test pins "today" with an explicit reference date and timezone so the
results never depend on the wall clock.
"""

# pylint: disable=protected-access

import copy
from datetime import UTC, date, timedelta
from zoneinfo import ZoneInfo

import pytest

from custom_components.tadalist.engines.streak_engine import StreakEngine

from .conftest import make_group, make_progress, make_task

TODAY = date(2026, 5, 12)
TODAY_ISO = "2026-05-12"
YESTERDAY_ISO = "2026-05-11"


def _done_today(task_id: str) -> dict:
    return make_task(task_id, completed_at="2026-05-12T09:00:00+00:00")


def _reconcile(group: dict, reference: date = TODAY) -> dict:
    return StreakEngine.reconcile(group, reference, UTC)


# ============================================================================
# Supporting operations
# ============================================================================


class TestThresholdAndQualification:
    """clamp_threshold / qualifies."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(3, 3), (1, 1), (0, 1), (-4, 1), ("2", 2), ("abc", 1), (None, 1), (2.9, 2)],
    )
    def test_clamp_threshold(self, raw, expected) -> None:
        """Threshold is always an integer >= 1."""
        assert StreakEngine.clamp_threshold(raw) == expected

    @pytest.mark.parametrize("threshold", [1, 2, 3, 7])
    def test_qualifies_iff_count_reaches_threshold(self, threshold: int) -> None:
        """qualifies <=> count >= threshold."""
        for count in range(10):
            assert StreakEngine.qualifies(count, threshold) is (count >= threshold)


class TestCountCompletedOn:
    """Counting completions per calendar day."""

    def test_counts_only_completed_tasks_of_that_day(self) -> None:
        """Open tasks and other days are ignored."""
        tasks = [
            _done_today("a"),
            make_task("b", completed_at="2026-05-11T09:00:00+00:00"),
            make_task("c"),
            _done_today("d"),
        ]
        assert StreakEngine.count_completed_on(tasks, TODAY_ISO, UTC) == 2

    def test_completion_day_follows_local_timezone(self) -> None:
        """23:30 in Los Angeles is the next UTC day but counts locally."""
        tasks = [make_task("a", completed_at="2026-05-13T06:30:00+00:00")]
        pacific = ZoneInfo("America/Los_Angeles")
        assert StreakEngine.count_completed_on(tasks, TODAY_ISO, pacific) == 1
        assert StreakEngine.count_completed_on(tasks, TODAY_ISO, UTC) == 0

    def test_completed_without_timestamp_is_not_counted(self) -> None:
        """A completed task with no timestamp belongs to no day."""
        task = make_task("a")
        task["completed"] = True
        assert StreakEngine.count_completed_on([task], TODAY_ISO, UTC) == 0


class TestRecomputeStreakTail:
    """Streak rebuilt from earlier earned days."""

    def test_counts_unbroken_run_only(self) -> None:
        """Counting stops at the first gap."""
        progress = [
            make_progress("2026-05-07"),
            make_progress("2026-05-09"),
            make_progress("2026-05-10"),
            make_progress("2026-05-11"),
            make_progress(TODAY_ISO),
        ]
        assert StreakEngine.recompute_streak_tail(progress, TODAY_ISO) == (
            3,
            YESTERDAY_ISO,
        )

    def test_ignores_unearned_entries(self) -> None:
        """Entries without streak_earned don't count."""
        progress = [
            make_progress("2026-05-10"),
            make_progress(YESTERDAY_ISO, earned=False),
        ]
        assert StreakEngine.recompute_streak_tail(progress, TODAY_ISO) == (
            1,
            "2026-05-10",
        )

    def test_no_earned_days(self) -> None:
        """Nothing earned means no streak."""
        progress = [make_progress(TODAY_ISO), make_progress(YESTERDAY_ISO, earned=False)]
        assert StreakEngine.recompute_streak_tail(progress, TODAY_ISO) == (0, None)

    def test_unordered_input(self) -> None:
        """Entries are sorted before counting."""
        progress = [
            make_progress("2026-05-10"),
            make_progress(YESTERDAY_ISO),
            make_progress("2026-05-09"),
        ]
        assert StreakEngine.recompute_streak_tail(progress, TODAY_ISO) == (
            3,
            YESTERDAY_ISO,
        )


class TestPruneDailyProgress:
    """Retention window."""

    def test_drops_entries_older_than_window(self) -> None:
        """Only entries within 30 days of today survive; the cutoff day stays."""
        progress = [
            make_progress((TODAY - timedelta(days=offset)).isoformat())
            for offset in (0, 1, 29, 30, 31, 45)
        ]
        kept = StreakEngine.prune_daily_progress(progress, TODAY, 30)
        assert [entry["date"] for entry in kept] == [
            "2026-05-12",
            "2026-05-11",
            "2026-04-13",
            "2026-04-12",
        ]

    def test_does_not_mutate_input(self) -> None:
        """A new list is returned."""
        progress = [make_progress("2026-01-01")]
        kept = StreakEngine.prune_daily_progress(progress, TODAY, 30)
        assert kept == []
        assert len(progress) == 1


# ============================================================================
# reconcile()
# ============================================================================


class TestReconcile:
    """Full reconciliation pass."""

    def test_first_qualifying_day_starts_streak(self) -> None:
        """No prior streak: qualifying today gives streak 1."""
        group = make_group(tasks=[_done_today("a")])
        result = _reconcile(group)
        assert result["streak"] == 1
        assert result["last_streak_date"] == TODAY_ISO
        assert result["daily_progress"] == [make_progress(TODAY_ISO, 1, True)]

    def test_monotonic_continuation(self) -> None:
        """Earned yesterday with streak s: qualifying today gives s + 1."""
        group = make_group(
            tasks=[_done_today("a")],
            streak=4,
            last_streak_date=YESTERDAY_ISO,
            daily_progress=[make_progress(YESTERDAY_ISO)],
        )
        result = _reconcile(group)
        assert result["streak"] == 5
        assert result["last_streak_date"] == TODAY_ISO

    @pytest.mark.parametrize("last", [None, "2026-05-10", "2026-04-01"])
    def test_gap_resets_to_one(self, last) -> None:
        """Missing or stale last streak date restarts the streak."""
        group = make_group(tasks=[_done_today("a")], streak=9, last_streak_date=last)
        result = _reconcile(group)
        assert result["streak"] == 1
        assert result["last_streak_date"] == TODAY_ISO

    def test_already_earned_today_is_not_counted_twice(self) -> None:
        """Completing more tasks after qualifying doesn't bump the streak."""
        group = make_group(
            tasks=[_done_today("a"), _done_today("b")],
            streak=3,
            last_streak_date=TODAY_ISO,
            daily_progress=[make_progress(TODAY_ISO, 1, True)],
        )
        result = _reconcile(group)
        assert result["streak"] == 3
        assert result["daily_progress"] == [make_progress(TODAY_ISO, 2, True)]

    def test_not_qualifying_without_today_streak_changes_nothing(self) -> None:
        """Below threshold and not earned today: only the count is updated."""
        group = make_group(
            tasks=[_done_today("a")],
            threshold=2,
            streak=2,
            last_streak_date=YESTERDAY_ISO,
            daily_progress=[make_progress(YESTERDAY_ISO, 2, True)],
        )
        result = _reconcile(group)
        assert result["streak"] == 2
        assert result["last_streak_date"] == YESTERDAY_ISO
        assert make_progress(TODAY_ISO, 1, False) in result["daily_progress"]

    def test_retroactive_revocation_rebuilds_from_tail(self) -> None:
        """Losing today rebuilds the streak from the earlier run."""
        group = make_group(
            tasks=[make_task("a")],
            streak=4,
            last_streak_date=TODAY_ISO,
            daily_progress=[
                make_progress("2026-05-08"),
                make_progress("2026-05-10"),
                make_progress(YESTERDAY_ISO),
                make_progress(TODAY_ISO),
            ],
        )
        result = _reconcile(group)
        assert result["streak"] == 2
        assert result["last_streak_date"] == YESTERDAY_ISO
        today_entry = StreakEngine.get_progress_entry(result["daily_progress"], TODAY_ISO)
        assert today_entry == make_progress(TODAY_ISO, 0, False)

    def test_retroactive_revocation_without_history(self) -> None:
        """Losing the only earned day clears the streak."""
        group = make_group(
            tasks=[make_task("a")],
            streak=1,
            last_streak_date=TODAY_ISO,
            daily_progress=[make_progress(TODAY_ISO)],
        )
        result = _reconcile(group)
        assert result["streak"] == 0
        assert result["last_streak_date"] is None

    def test_creates_today_entry_once(self) -> None:
        """At most one progress entry per date."""
        group = make_group(tasks=[make_task("a")])
        result = _reconcile(_reconcile(group))
        assert [e["date"] for e in result["daily_progress"]] == [TODAY_ISO]

    def test_idempotent_on_same_day(self) -> None:
        """Two reconciles in a row equal one."""
        group = make_group(
            tasks=[_done_today("a"), make_task("b")],
            streak=2,
            last_streak_date=YESTERDAY_ISO,
            daily_progress=[make_progress(YESTERDAY_ISO)],
        )
        once = _reconcile(group)
        assert _reconcile(once) == once

    def test_prunes_old_progress(self) -> None:
        """Entries older than the window are gone afterwards."""
        group = make_group(
            tasks=[],
            daily_progress=[make_progress("2026-03-01"), make_progress("2026-04-11")],
        )
        result = _reconcile(group)
        assert all(e["date"] >= "2026-04-12" for e in result["daily_progress"])
        assert [e["date"] for e in result["daily_progress"]] == [TODAY_ISO]

    def test_continuation_across_month_and_year(self) -> None:
        """Yesterday is a calendar day, so month and year rollovers continue."""
        for last, today in (("2026-02-28", date(2026, 3, 1)), ("2025-12-31", date(2026, 1, 1))):
            group = make_group(
                tasks=[make_task("a", completed_at=f"{today.isoformat()}T12:00:00+00:00")],
                streak=6,
                last_streak_date=last,
                daily_progress=[make_progress(last)],
            )
            result = _reconcile(group, today)
            assert result["streak"] == 7
            assert result["last_streak_date"] == today.isoformat()

    def test_long_streak_survives_pruning(self) -> None:
        """The counter is carried forward, not recomputed from the window."""
        group = make_group(
            tasks=[_done_today("a")],
            streak=45,
            last_streak_date=YESTERDAY_ISO,
            daily_progress=[make_progress(YESTERDAY_ISO)],
        )
        assert _reconcile(group)["streak"] == 46

    def test_input_is_not_mutated(self) -> None:
        """reconcile() is pure."""
        group = make_group(
            tasks=[_done_today("a")],
            streak=1,
            last_streak_date=YESTERDAY_ISO,
            daily_progress=[make_progress(YESTERDAY_ISO), make_progress("2026-01-01")],
        )
        snapshot = copy.deepcopy(group)
        result = _reconcile(group)
        assert group == snapshot
        assert result is not group
        assert result["daily_progress"] is not group["daily_progress"]

    def test_threshold_is_clamped(self) -> None:
        """A stored threshold of 0 behaves as 1."""
        group = make_group(tasks=[_done_today("a")], threshold=0)
        result = _reconcile(group)
        assert result["streak_threshold"] == 1
        assert result["streak"] == 1

    def test_lowering_threshold_can_earn_today(self) -> None:
        """Threshold 3 -> 1 with one task done earns today."""
        group = make_group(tasks=[_done_today("a")], threshold=3)
        assert _reconcile(group)["streak"] == 0
        group["streak_threshold"] = 1
        assert _reconcile(group)["streak"] == 1

    def test_raising_threshold_revokes_today(self) -> None:
        """Threshold 1 -> 2 with one task done revokes today."""
        earned = _reconcile(make_group(tasks=[_done_today("a")]))
        earned["streak_threshold"] = 2
        result = _reconcile(earned)
        assert result["streak"] == 0
        assert result["last_streak_date"] is None


class TestScenarios:
    """End-to-end sequences of mutations followed by reconciliation."""

    def test_threshold_two_then_delete_one(self) -> None:
        """Two tasks done (threshold 2) -> 1; delete one -> 0."""
        group = make_group(tasks=[_done_today("a"), _done_today("b")], threshold=2)
        group = _reconcile(group)
        assert group["streak"] == 1
        assert group["last_streak_date"] == TODAY_ISO

        group["tasks"] = [t for t in group["tasks"] if t["id"] != "b"]
        group = _reconcile(group)
        assert group["streak"] == 0
        assert group["last_streak_date"] is None

    def test_third_consecutive_day(self) -> None:
        """Earned day-2 and day-1 with streak 2; today qualifies -> 3."""
        group = make_group(
            tasks=[_done_today("a")],
            streak=2,
            last_streak_date=YESTERDAY_ISO,
            daily_progress=[make_progress("2026-05-10"), make_progress(YESTERDAY_ISO)],
        )
        assert _reconcile(group)["streak"] == 3

    def test_stale_streak_restarts(self) -> None:
        """Earned only day-5 with a stale streak; today qualifies -> 1."""
        group = make_group(
            tasks=[_done_today("a")],
            streak=6,
            last_streak_date="2026-05-07",
            daily_progress=[make_progress("2026-05-07")],
        )
        assert _reconcile(group)["streak"] == 1

    def test_day_by_day_sequence(self) -> None:
        """Three days in a row, each qualifying, then a skipped day."""
        group = make_group(tasks=[make_task("a")])
        for offset, expected in ((0, 1), (1, 2), (2, 3)):
            day = TODAY + timedelta(days=offset)
            group["tasks"][0]["completed"] = True
            group["tasks"][0]["completed_at"] = f"{day.isoformat()}T12:00:00+00:00"
            group = _reconcile(group, day)
            assert group["streak"] == expected

        skipped = TODAY + timedelta(days=4)
        group["tasks"][0]["completed_at"] = f"{skipped.isoformat()}T12:00:00+00:00"
        group = _reconcile(group, skipped)
        assert group["streak"] == 1
