"""
UTC-First Timezone Utilities
============================

All times arrive as ISO 8601 UTC ("Z" suffix). This module converts them
to any IANA timezone and builds the zulu / local / home-base strings shown
in duty and sleep tooltips.

Acclimatization logic follows EASA ORO.FTL.105:
    - Pilot remains on home-base body-clock reference if away < 48 h
    - After 48 h the pilot is considered adapted to the local timezone,
      unless the backend explicitly reports the crew as unacclimatized

Malformed timestamps never raise: zulu strings come back empty and
broken-down results come back zero-valued.
"""

import logging
from datetime import datetime
from functools import lru_cache
from typing import Optional, Tuple, Union
import pytz

from core.parameters import EASAFatigueFramework
from models.data_models import (
    AcclimatizationContext, BackendAcclimatizationState, TimeTriple, TimezoneResult,
)

logger = logging.getLogger(__name__)

RANGE_SEPARATOR = ' – '

_FRAMEWORK = EASAFatigueFramework()


# ============================================================================
# PARSING & ZONE LOOKUP
# ============================================================================

def parse_utc(iso_utc: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp into an aware UTC datetime.

    Naive timestamps are read as UTC. Returns None when unparsable.
    """
    if isinstance(iso_utc, datetime):
        moment = iso_utc
    elif isinstance(iso_utc, str) and iso_utc.strip():
        text = iso_utc.strip()
        if text.endswith(('Z', 'z')):
            text = text[:-1] + '+00:00'
        try:
            moment = datetime.fromisoformat(text)
        except ValueError:
            logger.debug(f"Unparsable timestamp: {iso_utc!r}")
            return None
    else:
        return None

    if moment.tzinfo is None:
        return pytz.utc.localize(moment)
    return _to_zone(moment, pytz.utc)


def _to_zone(moment: datetime, tz) -> Optional[datetime]:
    """astimezone that returns None when the result leaves year 1-9999"""
    try:
        return moment.astimezone(tz)
    except (OverflowError, ValueError):
        logger.debug(f"Timestamp {moment!r} out of range in {tz}")
        return None


@lru_cache(maxsize=None)
def get_timezone(iana_tz: str):
    """pytz zone for an IANA name, UTC for unknown names"""
    try:
        return pytz.timezone(iana_tz)
    except pytz.UnknownTimeZoneError:
        logger.warning(f"Unknown timezone '{iana_tz}'. Using UTC.")
        return pytz.utc


def timezone_label(iana_tz: str) -> str:
    """'America/New_York' -> 'New York'"""
    return iana_tz.split('/')[-1].replace('_', ' ') or iana_tz


# ============================================================================
# PRIMARY CONVERSIONS
# ============================================================================

def utc_to_zulu(iso_utc: Union[str, datetime, None]) -> str:
    """Zulu time as 'HH:mmZ', empty string for bad input"""
    moment = parse_utc(iso_utc)
    if moment is None:
        return ''
    return f"{moment.hour:02d}:{moment.minute:02d}Z"


def utc_to_timezone(iso_utc: Union[str, datetime, None], iana_tz: str) -> TimezoneResult:
    """
    Convert a UTC timestamp to a specific IANA timezone.

    Uses the zone's offset at that instant, so half-hour zones
    (Asia/Kolkata +05:30) and DST transitions come out right, and the
    day of month is the day in the target zone.
    """
    moment = parse_utc(iso_utc)
    if moment is None:
        return TimezoneResult.empty()

    local = _to_zone(moment, get_timezone(iana_tz))
    if local is None:
        return TimezoneResult.empty()
    return TimezoneResult(
        day=local.day,
        hour=local.hour + local.minute / 60,
        hh_mm=f"{local.hour:02d}:{local.minute:02d}",
        year=local.year,
        month=local.month,
        moment=local,
    )


def utc_to_home_base(iso_utc: Union[str, datetime, None], home_base_tz: str) -> TimezoneResult:
    return utc_to_timezone(iso_utc, home_base_tz)


def utc_day_hour(iso_utc: Union[str, datetime, None]) -> Tuple[int, float]:
    """UTC day-of-month and decimal hour for chart x-axis placement"""
    moment = parse_utc(iso_utc)
    if moment is None:
        return 0, 0.0
    return moment.day, moment.hour + moment.minute / 60


def utc_offset_hours(iana_tz: str, at: Union[str, datetime, None] = None) -> float:
    """UTC offset of a zone at an instant (now when omitted or unusable)"""
    tz = get_timezone(iana_tz)
    local = None
    if at is not None:
        moment = parse_utc(at)
        if moment is not None:
            local = _to_zone(moment, tz)
    if local is None:
        local = datetime.now(pytz.utc).astimezone(tz)
    return local.utcoffset().total_seconds() / 3600


# ============================================================================
# HH:mm HELPERS
# ============================================================================

def parse_time_to_hours(time_str: Optional[str]) -> Optional[float]:
    """'18:30' -> 18.5, None when unparsable"""
    if not time_str:
        return None
    parts = time_str.split(':')
    if len(parts) < 2:
        return None
    try:
        return int(parts[0]) + int(parts[1]) / 60
    except ValueError:
        return None


def decimal_to_hhmm(hours: float) -> str:
    """18.5 -> '18:30'. Values outside 0-24 wrap around the clock."""
    total_minutes = int(round(hours * 60)) % (24 * 60)
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


# ============================================================================
# ACCLIMATIZATION (EASA ORO.FTL.105)
# ============================================================================

def coerce_backend_state(state) -> Optional[BackendAcclimatizationState]:
    """Backend state from an enum, a string or None"""
    if state is None or isinstance(state, BackendAcclimatizationState):
        return state
    try:
        return BackendAcclimatizationState(str(state).lower())
    except ValueError:
        logger.warning(f"Unrecognised acclimatization state '{state}', ignoring")
        return None


def get_acclimatized_timezone(
    ctx: AcclimatizationContext,
    framework: EASAFatigueFramework = None,
) -> str:
    """
    Body-clock reference timezone for a pilot.

    - Away < 48 h: home base, whatever the backend says
    - Away >= 48 h: location, unless the backend reports unacclimatized
    """
    framework = framework or _FRAMEWORK
    if ctx.hours_away_from_base < framework.acclimatization_threshold_hours:
        return ctx.home_base_timezone

    if coerce_backend_state(ctx.backend_state) == BackendAcclimatizationState.UNACCLIMATIZED:
        return ctx.home_base_timezone

    return ctx.location_timezone


def is_on_home_base_reference(
    ctx: AcclimatizationContext,
    framework: EASAFatigueFramework = None,
) -> bool:
    """Strict 48 h check, independent of backend state"""
    framework = framework or _FRAMEWORK
    return ctx.hours_away_from_base < framework.acclimatization_threshold_hours


# ============================================================================
# TRIPLE-FORMAT TOOLTIP HELPERS
# ============================================================================

def _context(
    ctx: Optional[AcclimatizationContext],
    location_tz: str,
    home_base_tz: str,
) -> AcclimatizationContext:
    if ctx is None:
        return AcclimatizationContext(
            hours_away_from_base=0.0,
            location_timezone=location_tz,
            home_base_timezone=home_base_tz,
        )
    return AcclimatizationContext(
        hours_away_from_base=ctx.hours_away_from_base,
        location_timezone=location_tz,
        home_base_timezone=home_base_tz,
        backend_state=coerce_backend_state(ctx.backend_state),
    )


def _zulu_range(start_iso, end_iso) -> str:
    return f"{utc_to_zulu(start_iso)}{RANGE_SEPARATOR}{utc_to_zulu(end_iso)}"


def _home_ranges(start_iso, end_iso, home_base_tz: str) -> Tuple[str, str]:
    start_home = utc_to_home_base(start_iso, home_base_tz)
    end_home = utc_to_home_base(end_iso, home_base_tz)
    span = f"{start_home.hh_mm}{RANGE_SEPARATOR}{end_home.hh_mm}"
    return f"{span} {timezone_label(home_base_tz)}", f"{span} (home ref)"


def build_triple_time(
    departure_utc,
    arrival_utc,
    departure_tz: str,
    arrival_tz: str,
    home_base_tz: str,
    departure_code: str,
    arrival_code: str,
    ctx: AcclimatizationContext = None,
) -> TimeTriple:
    """
    Zulu, local and home-base strings for a flight segment tooltip.

    The local line shows airport-local times labelled with the airport
    codes only once the pilot is past the 48 h home-base reference.
    """
    home, home_ref = _home_ranges(departure_utc, arrival_utc, home_base_tz)
    local_is_home_ref = is_on_home_base_reference(_context(ctx, arrival_tz, home_base_tz))

    if local_is_home_ref:
        local = home_ref
    else:
        dep_local = utc_to_timezone(departure_utc, departure_tz)
        arr_local = utc_to_timezone(arrival_utc, arrival_tz)
        local = f"{dep_local.hh_mm} {departure_code}{RANGE_SEPARATOR}{arr_local.hh_mm} {arrival_code}"

    return TimeTriple(
        zulu=_zulu_range(departure_utc, arrival_utc),
        local=local,
        home=home,
        local_is_home_ref=local_is_home_ref,
    )


def build_sleep_triple_time(
    sleep_start_utc,
    sleep_end_utc,
    location_tz: str,
    home_base_tz: str,
    ctx: AcclimatizationContext = None,
) -> TimeTriple:
    """Triple-format strings for a sleep window at a single location"""
    home, home_ref = _home_ranges(sleep_start_utc, sleep_end_utc, home_base_tz)
    local_is_home_ref = is_on_home_base_reference(_context(ctx, location_tz, home_base_tz))

    if local_is_home_ref:
        local = home_ref
    else:
        start_local = utc_to_timezone(sleep_start_utc, location_tz)
        end_local = utc_to_timezone(sleep_end_utc, location_tz)
        local = f"{start_local.hh_mm}{RANGE_SEPARATOR}{end_local.hh_mm} {timezone_label(location_tz)}"

    return TimeTriple(
        zulu=_zulu_range(sleep_start_utc, sleep_end_utc),
        local=local,
        home=home,
        local_is_home_ref=local_is_home_ref,
    )
