"""
Request normalization.

Turns an unchecked ``LogRequest`` into a ``StateOfMind`` sample. Vocabulary
fields are resolved all-or-nothing: a single unknown code fails the whole
request instead of being dropped.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo

from .errors import (
    TimeNormalizationFailed,
    UnsupportedAssociation,
    UnsupportedKind,
    UnsupportedLabel,
    ValenceOutOfRange,
    ValidationError,
)
from .models import LogRequest, StateOfMind
from .valence import is_valid_valence
from .vocabulary import Association, CodedEnum, Kind, Label

logger = logging.getLogger(__name__)

DAILY_MOOD_HOUR = 22


@dataclass(frozen=True)
class CalendarPolicy:
    """
    Calendar used to decide whether a daily mood is in the past.

    When ``timezone`` is None, each timestamp is judged in its own zone and
    keeps that zone. Otherwise timestamps are viewed in ``timezone`` and the
    moved daily mood is expressed there.
    """

    timezone: tzinfo | None = None
    daily_mood_hour: int = DAILY_MOOD_HOUR


DEFAULT_POLICY = CalendarPolicy()


def normalize(
    request: LogRequest,
    now: datetime | None = None,
    policy: CalendarPolicy = DEFAULT_POLICY,
) -> StateOfMind:
    """
    Validate ``request`` and build a sample from it.

    Args:
        request: The unchecked request
        now: Reference time for defaulting and for deciding what "today" is
        policy: Calendar policy for the daily mood time override

    Returns:
        The normalized sample

    Raises:
        ValidationError: If any field is out of range or unknown
    """
    if now is None:
        now = datetime.now().astimezone()

    if not is_valid_valence(request.valence):
        raise ValenceOutOfRange(request.valence)

    kind = Kind.resolve(request.kind)
    if kind is None:
        raise UnsupportedKind(request.kind)

    labels = _resolve_all(Label, request.labels or [], UnsupportedLabel)
    associations = _resolve_all(
        Association, request.associations or [], UnsupportedAssociation
    )

    date = request.date or now
    if kind is Kind.DAILY_MOOD and request.override_past_daily_mood_time:
        date = _override_past_daily_mood_time(date, now, policy)

    sample = StateOfMind(
        date=date,
        kind=kind,
        valence=request.valence,
        labels=labels,
        associations=associations,
    )
    logger.debug("Normalized %s sample %s", kind.name, sample.id)
    return sample


def _resolve_all(
    enum_type: type[CodedEnum],
    values: Iterable[int | str],
    error: type[ValidationError],
) -> tuple[CodedEnum, ...]:
    resolved = [(value, enum_type.resolve(value)) for value in values]
    unknown = [value for value, member in resolved if member is None]
    if unknown:
        raise error(unknown)
    return tuple(member for _, member in resolved)


def _in_zone(moment: datetime, zone: tzinfo | None) -> datetime:
    if zone is None:
        if moment.tzinfo is None:
            return moment
        # Naive comparison frame: local wall time
        return moment.astimezone().replace(tzinfo=None)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=zone)
    return moment.astimezone(zone)


def _exists(moment: datetime) -> bool:
    """Whether an aware wall time exists in its zone (not inside a DST gap)."""
    if moment.tzinfo is None:
        return True
    round_trip = moment.astimezone(timezone.utc).astimezone(moment.tzinfo)
    return round_trip.replace(tzinfo=None) == moment.replace(tzinfo=None)


def _override_past_daily_mood_time(
    date: datetime, now: datetime, policy: CalendarPolicy
) -> datetime:
    zone = policy.timezone or date.tzinfo
    local = _in_zone(date, zone)
    if local.date() == _in_zone(now, zone).date():
        return date

    try:
        moved = local.replace(
            hour=policy.daily_mood_hour, minute=0, second=0, microsecond=0
        )
    except ValueError as e:
        raise TimeNormalizationFailed(date, str(e)) from e

    if not _exists(moved):
        raise TimeNormalizationFailed(
            date, f"{moved.replace(tzinfo=None)} does not exist in {moved.tzinfo}"
        )

    logger.debug("Moved past daily mood from %s to %s", date, moved)
    return moved
