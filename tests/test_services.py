"""
Vigia - Moderation Service Tests
================================

Tests for validation, writes and aggregated views.
"""

from datetime import datetime, timezone

import pytest

from vigia.services import aggregation
from vigia.utils.validators import ValidationError


class TestValidation:
    """Rejected calls name the field and write nothing."""

    def test_log_requires_member_id(self, service, test_db):
        with pytest.raises(ValidationError) as exc_info:
            service.append_log(None, message="hello")
        assert exc_info.value.field == "member_id"
        assert test_db.get_logs_between("0000", "9999") == []

    def test_log_requires_message(self, service, test_db):
        with pytest.raises(ValidationError) as exc_info:
            service.append_log("1", message="   ")
        assert exc_info.value.field == "message"
        assert test_db.get_member_logs("1") == []

    def test_unknown_kind(self, service, test_db):
        with pytest.raises(ValidationError) as exc_info:
            service.record_punishment("kick", "1")
        assert exc_info.value.field == "kind"
        assert exc_info.value.code == ValidationError.INVALID_VALUE
        assert test_db.get_member_punishments("1") == []

    def test_bad_end_at(self, service, test_db):
        with pytest.raises(ValidationError) as exc_info:
            service.record_punishment("mute", "1", duration_hours=2, end_at="tomorrow")
        assert exc_info.value.field == "end_at"
        assert test_db.get_member_punishments("1") == []

    def test_bad_month(self, service):
        with pytest.raises(ValidationError) as exc_info:
            service.period_slice("2024-13")
        assert exc_info.value.field == "month"
        assert exc_info.value.code == ValidationError.INVALID_FORMAT

    def test_batch_validates_before_writing(self, service, test_db):
        with pytest.raises(ValidationError) as exc_info:
            service.sync_members_batch("g1", [
                {"member_id": "1", "display_name": "a"},
                {"member_id": "", "display_name": "b"},
            ])
        assert exc_info.value.field == "members[1].member_id"
        assert test_db.get_members() == []


class TestWrites:
    """Tests for normalisation on write."""

    def test_numeric_member_id_is_text(self, service, test_db):
        service.sync_member(123, "alice")
        assert test_db.get_member("123")["name"] == "alice"

    def test_joined_at_defaults_to_now(self, service, test_db):
        service.sync_member("1", "alice")
        assert test_db.get_member("1")["joined_at"] == "2024-02-15T12:00:00.000Z"

    def test_timestamps_are_normalised(self, service, test_db):
        service.append_log("1", message="hi", timestamp="2024-02-01T03:00:00+03:00")
        assert test_db.get_member_logs("1")[0]["timestamp"] == "2024-02-01T00:00:00.000Z"

    def test_duration_dropped_for_warn(self, service, test_db):
        service.record_punishment("warn", "1", duration_hours=2, end_at="2024-03-01T00:00:00Z")
        stored = test_db.get_member_punishments("1")[0]
        assert stored["duration_hours"] is None
        assert stored["end_at"] is None

    def test_kind_is_case_insensitive(self, service, test_db):
        service.record_punishment("MUTE", "1", duration_hours=2, end_at="2024-02-15T14:00:00Z")
        stored = test_db.get_member_punishments("1")[0]
        assert stored["kind"] == "mute"
        assert stored["end_at"] == "2024-02-15T14:00:00.000Z"

    @pytest.mark.parametrize("count, stored", [(5, 5), (0, 1), (-3, 1), ("abc", 1), (None, 1)])
    def test_ticket_count_coerced(self, service, test_db, count, stored):
        service.record_ticket_batch("9", "agent", count)
        assert test_db.get_ticket_total("9") == stored

    def test_remove_member(self, service, test_db):
        service.sync_member("1", "alice")
        assert service.remove_member("1") is True
        assert service.remove_member("1") is False


class TestNextAction:
    """Tests for the service view of the escalation policy."""

    def test_unknown_member_warns(self, service):
        assert service.next_action("nobody").to_dict() == {"action": "warn"}

    def test_active_mute_then_expiry(self, service, clock):
        service.record_punishment("warn", "1")
        service.record_punishment("mute", "1", duration_hours=2, end_at="2024-02-15T14:00:00Z")

        assert service.next_action("1").to_dict() == {
            "action": "activeMute",
            "until": "2024-02-15T14:00:00.000Z",
        }

        clock.now = datetime(2024, 2, 15, 14, 0, 0, tzinfo=timezone.utc)
        assert service.next_action("1").to_dict() == {"action": "mute", "hours": 4}

    def test_naive_now_accepted(self, service):
        service.record_punishment("mute", "1", duration_hours=2, end_at="2024-02-15T14:00:00Z")

        result = service.next_action("1", datetime(2024, 2, 15, 13, 0))

        assert result.to_dict() == {"action": "activeMute", "until": "2024-02-15T14:00:00.000Z"}

    def test_naive_clock_in_member_list(self, service, test_db):
        service.sync_member("1", "alice")
        service.record_punishment("mute", "1", duration_hours=2, end_at="2024-02-15T14:00:00Z")

        members = aggregation.list_members(test_db, datetime(2024, 2, 15, 13, 0))
        rollup = aggregation.build_rollup(test_db, "1", datetime(2024, 2, 15, 15, 0))

        assert members[0]["active_mute"]["end_at"] == "2024-02-15T14:00:00.000Z"
        assert rollup.active_mute is None


class TestMemberViews:
    """Tests for the member list and member detail."""

    def test_list_members_rollup(self, service):
        service.sync_member("1", "alice", guild_id="g1")
        service.sync_member("2", "", guild_id="g2")
        service.record_punishment("warn", "1")
        service.record_punishment("mute", "1", duration_hours=2, end_at="2024-02-15T14:00:00Z")
        service.record_ticket_batch("1", "alice", 3)

        members = {m["member_id"]: m for m in service.list_members()}

        alice = members["1"]
        assert alice["warn_count"] == 1
        assert alice["mute_count"] == 1
        assert alice["ban_count"] == 0
        assert alice["ticket_total"] == 3
        assert alice["tickets"] == 3
        assert alice["last_punishment"]["kind"] == "mute"
        assert alice["active_mute"]["end_at"] == "2024-02-15T14:00:00.000Z"

        assert members["2"]["display_name"] == "2"
        assert members["2"]["last_punishment"] is None

    def test_list_members_guild_filter(self, service):
        service.sync_member("1", "a", guild_id="g1")
        service.sync_member("2", "b", guild_id="g2")
        service.sync_member("3", "c")

        assert [m["member_id"] for m in service.list_members("g1")] == ["1", "3"]

    def test_expired_mute_not_active(self, service, clock):
        service.sync_member("1", "alice")
        service.record_punishment("mute", "1", duration_hours=2, end_at="2024-02-15T14:00:00Z")

        clock.now = datetime(2024, 2, 16, tzinfo=timezone.utc)
        assert service.list_members()[0]["active_mute"] is None

    def test_member_detail(self, service):
        service.sync_member("1", "alice")
        service.record_punishment("warn", "1")
        service.record_punishment("ban", "1")
        service.append_log("1", message="hello")

        detail = service.member_detail("1")

        assert detail["member"]["name"] == "alice"
        assert detail["rollup"]["warn_count"] == 1
        assert detail["rollup"]["ban_count"] == 1
        assert len(detail["punishments_by_kind"]["warns"]) == 1
        assert len(detail["punishments_by_kind"]["bans"]) == 1
        assert detail["punishments_by_kind"]["mutes"] == []
        assert [log["message"] for log in detail["logs"]] == ["hello"]

    def test_unknown_member_detail_is_empty(self, service):
        detail = service.member_detail("ghost")

        assert detail["member"]["id"] == "ghost"
        assert detail["rollup"]["warn_count"] == 0
        assert detail["rollup"]["last_punishment"] is None
        assert detail["logs"] == []


class TestPeriodSlice:
    """Tests for the monthly window."""

    def test_next_month_boundary_excluded(self, service):
        service.append_log("1", message="first", timestamp="2024-02-01T00:00:00Z")
        service.append_log("1", message="last", timestamp="2024-02-29T23:59:59.999Z")
        service.append_log("1", message="next", timestamp="2024-03-01T00:00:00Z")
        service.record_punishment("warn", "1", timestamp="2024-03-01T00:00:00Z")

        period = service.period_slice("2024-02")

        assert period.start == "2024-02-01T00:00:00.000Z"
        assert period.end == "2024-03-01T00:00:00.000Z"
        assert [log["message"] for log in period.logs] == ["first", "last"]
        assert period.punishments == []

    def test_december_rolls_over(self, service):
        period = service.period_slice("2023-12")
        assert period.end == "2024-01-01T00:00:00.000Z"

    def test_ticket_batches_use_insertion_time(self, service):
        service.record_ticket_batch("1", "agent", 2)
        assert len(service.period_slice("2024-02").ticket_batches) == 1
        assert service.period_slice("2024-01").ticket_batches == []


class TestClear:
    """Tests for purges through the service."""

    def test_clear_member_leaves_others(self, service):
        service.record_punishment("warn", "1")
        service.record_punishment("warn", "2")

        assert service.clear_member("1") == {"logs": 0, "punishments": 1}
        assert service.next_action("1").to_dict() == {"action": "warn"}
        assert service.next_action("2").to_dict() == {"action": "mute", "hours": 2}

    def test_clear_member_requires_id(self, service):
        with pytest.raises(ValidationError):
            service.clear_member("")
