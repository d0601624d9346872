"""
Vigia - Escalation Policy
=========================

Derives a member's next disciplinary action from their punishment history.

The ladder is fixed:

    warn -> mute 2h -> mute 4h -> mute 6h -> reset to warn

No "current tier" is stored anywhere. State is rebuilt on every call by
scanning the member's punishments from most recent (highest id) to
oldest, so replaying the same facts at the same instant always yields
the same answer.

Usage:
    from vigia.services.escalation import compute_next_action

    result = compute_next_action(db.get_member_punishments(member_id), now)
    result.to_dict()  # {"action": "mute", "hours": 4}
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from vigia.core.constants import FIRST_MUTE_HOURS, MUTE_LADDER_HOURS, PunishmentKind
from vigia.utils.timestamps import parse_timestamp


PunishmentLike = Mapping[str, Any]


# =============================================================================
# Result Types
# =============================================================================

class ActionType(str, Enum):
    """What should happen to the member next."""

    WARN = "warn"
    MUTE = "mute"
    ACTIVE_MUTE = "activeMute"


@dataclass(frozen=True)
class NextAction:
    """
    Result of the escalation policy.

    Attributes:
        action: Next step on the ladder, or activeMute while muted.
        hours: Mute length, set only for MUTE.
        until: Expiry of the current mute, set only for ACTIVE_MUTE.
    """
    action: ActionType
    hours: Optional[Union[int, float]] = None
    until: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"action": self.action.value}
        if self.hours is not None:
            data["hours"] = self.hours
        if self.until is not None:
            data["until"] = self.until
        return data


# =============================================================================
# History Scanning
# =============================================================================

def _by_recency(history: Iterable[PunishmentLike]) -> List[PunishmentLike]:
    """Order facts by surrogate id, newest first. Timestamps are ignored."""
    return sorted(history, key=lambda p: p["id"], reverse=True)


def _end_at(punishment: PunishmentLike) -> Optional[datetime]:
    return parse_timestamp(punishment.get("end_at"))


def find_active_mute(history: Iterable[PunishmentLike], now: datetime) -> Optional[PunishmentLike]:
    """
    Most recent time-boxed mute whose end_at is strictly after now.

    Args:
        history: One member's punishments, any order.
        now: Evaluation instant. Naive values are taken as UTC.

    Returns:
        The punishment row, or None if the member is not muted.
    """
    now = parse_timestamp(now)
    for punishment in _by_recency(history):
        if punishment["kind"] != PunishmentKind.MUTE.value:
            continue
        end_at = _end_at(punishment)
        if end_at is not None and end_at > now:
            return punishment
    return None


def find_last_completed_action(
    history: Iterable[PunishmentLike],
    now: datetime,
) -> Optional[PunishmentLike]:
    """
    Most recent punishment that no longer blocks a new action.

    A warn always counts. A mute counts when it was never time-boxed
    (end_at null) or its end_at is at or before now. Bans never count
    and are skipped entirely.
    """
    now = parse_timestamp(now)
    for punishment in _by_recency(history):
        kind = punishment["kind"]
        if kind == PunishmentKind.WARN.value:
            return punishment
        if kind == PunishmentKind.MUTE.value:
            end_at = _end_at(punishment)
            if end_at is None or end_at <= now:
                return punishment
    return None


def _mute_hours(punishment: PunishmentLike) -> Union[int, float]:
    # Missing duration reads as 0, which lands on the first rung.
    return punishment.get("duration_hours") or 0


# =============================================================================
# Policy
# =============================================================================

def compute_next_action(history: Iterable[PunishmentLike], now: datetime) -> NextAction:
    """
    Decide the next disciplinary action for one member.

    Pure function of (history, now). An empty history, including an
    unknown member, yields WARN.

    Args:
        history: The member's punishments, any order.
        now: Evaluation instant. Naive values are taken as UTC.

    Returns:
        NextAction for the member.
    """
    history = list(history)
    now = parse_timestamp(now)

    active = find_active_mute(history, now)
    if active is not None:
        return NextAction(ActionType.ACTIVE_MUTE, until=active["end_at"])

    last = find_last_completed_action(history, now)
    if last is None:
        return NextAction(ActionType.WARN)

    if last["kind"] == PunishmentKind.WARN.value:
        return NextAction(ActionType.MUTE, hours=FIRST_MUTE_HOURS)

    if last["kind"] == PunishmentKind.MUTE.value:
        hours = _mute_hours(last)
        # Off-ladder durations compare literally: 3h steps to 6h, 8h resets.
        if hours <= MUTE_LADDER_HOURS[0]:
            return NextAction(ActionType.MUTE, hours=MUTE_LADDER_HOURS[1])
        if hours <= MUTE_LADDER_HOURS[1]:
            return NextAction(ActionType.MUTE, hours=MUTE_LADDER_HOURS[2])
        return NextAction(ActionType.WARN)

    return NextAction(ActionType.WARN)


__all__ = [
    "ActionType",
    "NextAction",
    "find_active_mute",
    "find_last_completed_action",
    "compute_next_action",
]
