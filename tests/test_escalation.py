"""
Vigia - Escalation Policy Tests
===============================

Tests for the warn -> mute 2h -> mute 4h -> mute 6h -> warn ladder.
"""

from datetime import datetime, timezone

import pytest

from vigia.services.escalation import (
    ActionType,
    NextAction,
    compute_next_action,
    find_active_mute,
    find_last_completed_action,
)


NOW = datetime(2024, 2, 15, 12, 0, 0, tzinfo=timezone.utc)
PAST = "2024-02-15T10:00:00.000Z"
FUTURE = "2024-02-15T14:00:00.000Z"


def warn(pid):
    return {"id": pid, "kind": "warn", "duration_hours": None, "end_at": None}


def mute(pid, hours=2, end_at=PAST):
    return {"id": pid, "kind": "mute", "duration_hours": hours, "end_at": end_at}


def ban(pid):
    return {"id": pid, "kind": "ban", "duration_hours": None, "end_at": None}


class TestLadder:
    """Tests for each rung of the ladder."""

    def test_empty_history_warns(self):
        assert compute_next_action([], NOW) == NextAction(ActionType.WARN)

    def test_after_warn_mutes_two_hours(self):
        result = compute_next_action([warn(1)], NOW)
        assert result.to_dict() == {"action": "mute", "hours": 2}

    def test_after_two_hour_mute(self):
        result = compute_next_action([warn(1), mute(2, 2)], NOW)
        assert result.to_dict() == {"action": "mute", "hours": 4}

    def test_after_four_hour_mute(self):
        result = compute_next_action([warn(1), mute(2, 2), mute(3, 4)], NOW)
        assert result.to_dict() == {"action": "mute", "hours": 6}

    def test_after_six_hour_mute_resets(self):
        result = compute_next_action([warn(1), mute(2, 2), mute(3, 4), mute(4, 6)], NOW)
        assert result.to_dict() == {"action": "warn"}

    def test_full_cycle(self):
        history = []
        expected = [
            ("warn", None),
            ("mute", 2),
            ("mute", 4),
            ("mute", 6),
            ("warn", None),
            ("mute", 2),
        ]
        for pid, (action, hours) in enumerate(expected, start=1):
            result = compute_next_action(history, NOW)
            assert result.action.value == action
            assert result.hours == hours
            if action == "warn":
                history.append(warn(pid))
            else:
                history.append(mute(pid, hours))


class TestOffLadderDurations:
    """Tests for durations that are not 2, 4 or 6."""

    @pytest.mark.parametrize("hours, expected", [
        (1, {"action": "mute", "hours": 4}),
        (3, {"action": "mute", "hours": 6}),
        (5, {"action": "warn"}),
        (8, {"action": "warn"}),
        (0.5, {"action": "mute", "hours": 4}),
    ])
    def test_thresholds(self, hours, expected):
        assert compute_next_action([mute(1, hours)], NOW).to_dict() == expected

    def test_missing_duration_counts_as_zero(self):
        result = compute_next_action([mute(1, None)], NOW)
        assert result.to_dict() == {"action": "mute", "hours": 4}


class TestActiveMute:
    """Tests for mutes that have not expired yet."""

    def test_running_mute_blocks(self):
        result = compute_next_action([warn(1), mute(2, 2, FUTURE)], NOW)
        assert result.to_dict() == {"action": "activeMute", "until": FUTURE}

    def test_expiry_is_exclusive_at_now(self):
        end = "2024-02-15T12:00:00.000Z"
        result = compute_next_action([mute(1, 2, end)], NOW)
        assert result.action is ActionType.MUTE
        assert result.hours == 4

    def test_same_history_changes_with_time(self):
        history = [warn(1), mute(2, 2, FUTURE)]
        later = datetime(2024, 2, 15, 15, 0, 0, tzinfo=timezone.utc)

        assert compute_next_action(history, NOW).action is ActionType.ACTIVE_MUTE
        assert compute_next_action(history, later).to_dict() == {"action": "mute", "hours": 4}

    def test_ban_while_muted_stays_active(self):
        history = [mute(1, 4, FUTURE), ban(2)]
        assert compute_next_action(history, NOW).action is ActionType.ACTIVE_MUTE

    def test_open_ended_mute_counts_as_completed(self):
        history = [warn(1), mute(2, 2, None)]
        assert compute_next_action(history, NOW).to_dict() == {"action": "mute", "hours": 4}

    def test_naive_now_taken_as_utc(self):
        history = [warn(1), mute(2, 2, FUTURE)]

        assert compute_next_action(history, datetime(2024, 2, 15, 13, 0)).action is ActionType.ACTIVE_MUTE
        assert compute_next_action(history, datetime(2024, 2, 15, 14, 0)).to_dict() == {
            "action": "mute",
            "hours": 4,
        }

    def test_find_active_mute_picks_most_recent(self):
        older = mute(1, 2, "2024-02-15T13:00:00.000Z")
        newer = mute(2, 4, FUTURE)
        assert find_active_mute([older, newer], NOW) is newer


class TestBans:
    """Bans are outside the ladder."""

    def test_ban_only_history_warns(self):
        assert compute_next_action([ban(1)], NOW).action is ActionType.WARN

    def test_ban_after_warn_is_skipped(self):
        assert compute_next_action([warn(1), ban(2)], NOW).to_dict() == {"action": "mute", "hours": 2}

    def test_last_completed_skips_bans(self):
        history = [mute(1, 2), ban(2), ban(3)]
        assert find_last_completed_action(history, NOW)["id"] == 1


class TestDeterminism:
    """The decision depends only on ids and now."""

    def test_input_order_does_not_matter(self):
        history = [mute(3, 4), warn(1), mute(2, 2)]
        assert compute_next_action(history, NOW).to_dict() == {"action": "mute", "hours": 6}
        assert compute_next_action(list(reversed(history)), NOW).to_dict() == {"action": "mute", "hours": 6}

    def test_repeated_calls_agree(self):
        history = [warn(1), mute(2, 2, FUTURE)]
        first = compute_next_action(history, NOW)
        second = compute_next_action(history, NOW)
        assert first == second

    def test_to_dict_omits_unset_fields(self):
        assert NextAction(ActionType.WARN).to_dict() == {"action": "warn"}
