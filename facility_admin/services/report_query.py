"""
Report query composer.

Turns a set of optional filters into one read against the store over the
fixed report -> room -> floor -> building path, then orders the result.

Two orderings are supported:
- recency: newest first
- triage:  every pending report before every completed one, newest first
           within each group
"""
import logging
from dataclasses import dataclass
import datetime
from typing import Optional

from facility_admin.services.lifecycle import STATUSES, STATUS_RANK
from facility_admin.services.outcomes import Ok, QueryFailed, ValidationError
from facility_admin.services.store import Join, Order, Predicate, StoreError
from facility_admin.utils.dates import (day_bounds, local_today, parse_filter_date,
                                        parse_store_timestamp,
                                        to_store_timestamp)

logger = logging.getLogger(__name__)

MODE_RECENCY = 'recency'
MODE_TRIAGE = 'triage'
MODES = (MODE_RECENCY, MODE_TRIAGE)

# Nullable left joins so a broken link shows as a missing location
JOIN_PATH = (
    Join('room', 'room', 'report.room_id', 'room.id'),
    Join('floor', 'floor', 'room.floor_id', 'floor.id'),
    Join('building', 'building', 'floor.building_id', 'building.id'),
)

REPORT_COLUMNS = (
    'report.id',
    'report.name',
    'report.equipment',
    'report.description',
    'report.action_taken',
    'report.created_at',
    'report.status',
    'report.room_id',
    ('room.room_name', 'room_name'),
    ('room.floor_id', 'floor_id'),
    ('floor.floor_name', 'floor_name'),
    ('floor.building_id', 'building_id'),
    ('building.name', 'building_name'),
)


@dataclass(frozen=True)
class FilterCriteria:
    date: Optional[datetime.date] = None
    building_id: Optional[str] = None
    floor_id: Optional[str] = None
    room_id: Optional[str] = None

    def is_empty(self):
        return not (self.date or self.building_id or self.floor_id or self.room_id)


@dataclass(frozen=True)
class ReadRequest:
    """Everything the store needs for one read."""
    table: str
    columns: tuple
    joins: tuple
    predicates: tuple
    order: tuple


def _clean_id(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def parse_criteria(args):
    """
    Build FilterCriteria from request-style args
    (keys: date, building, floor, room).
    Returns Ok(FilterCriteria) or ValidationError for a malformed date.
    """
    raw_date = (args.get('date') or '').strip()
    day = None
    if raw_date:
        try:
            day = parse_filter_date(raw_date)
        except ValueError:
            return ValidationError(f'Invalid date: {raw_date!r} (expected YYYY-MM-DD)')

    return Ok(FilterCriteria(
        date=day,
        building_id=_clean_id(args.get('building')),
        floor_id=_clean_id(args.get('floor')),
        room_id=_clean_id(args.get('room')),
    ))


def compose_report_query(criteria, status=None, tz=None):
    """Translate filters into a ReadRequest. Absent filters add nothing."""
    predicates = []

    if criteria.date is not None:
        start, end = day_bounds(criteria.date, tz)
        predicates.append(Predicate('report.created_at', '>=', to_store_timestamp(start)))
        predicates.append(Predicate('report.created_at', '<=', to_store_timestamp(end)))

    if criteria.building_id is not None:
        predicates.append(Predicate('floor.building_id', '=', criteria.building_id))

    if criteria.floor_id is not None:
        predicates.append(Predicate('room.floor_id', '=', criteria.floor_id))

    if criteria.room_id is not None:
        predicates.append(Predicate('report.room_id', '=', criteria.room_id))

    if status is not None:
        predicates.append(Predicate('report.status', '=', status))

    return ReadRequest(
        table='report',
        columns=REPORT_COLUMNS,
        joins=JOIN_PATH,
        predicates=tuple(predicates),
        order=(Order('report.created_at', 'desc'), Order('report.id', 'asc')),
    )


def normalize_report(row):
    """
    Flat joined row -> nested report dict:
        report['room']['floor']['building']
    A missing link is None at that level.
    """
    building = None
    if row.get('building_name') is not None:
        building = {'id': row['building_id'], 'name': row['building_name']}

    floor = None
    if row.get('floor_name') is not None:
        floor = {
            'id': row['floor_id'],
            'floor_name': row['floor_name'],
            'building_id': row['building_id'],
            'building': building,
        }

    room = None
    if row.get('room_name') is not None:
        room = {
            'id': row['room_id'],
            'room_name': row['room_name'],
            'floor_id': row['floor_id'],
            'floor': floor,
        }

    return {
        'id': row['id'],
        'name': row['name'],
        'equipment': row['equipment'],
        'description': row['description'],
        'action_taken': row['action_taken'],
        'created_at': parse_store_timestamp(row['created_at']),
        'status': row['status'],
        'room_id': row['room_id'],
        'room': room,
    }


def location_of(report):
    """(building_name, floor_name, room_name) with None for missing links."""
    room = report.get('room')
    floor = room.get('floor') if room else None
    building = floor.get('building') if floor else None
    return (
        building['name'] if building else None,
        floor['floor_name'] if floor else None,
        room['room_name'] if room else None,
    )


def sort_reports(reports, mode=MODE_RECENCY):
    """Return a new list in recency or triage order."""
    ordered = sorted(reports, key=lambda r: r['created_at'], reverse=True)
    if mode == MODE_TRIAGE:
        # Stable: keeps newest-first inside each status group
        ordered.sort(key=lambda r: STATUS_RANK.get(r['status'], len(STATUS_RANK)))
    return ordered


def fetch_reports(store, criteria, mode=MODE_RECENCY, status=None, tz=None):
    """
    Run a filtered report listing.
    Returns Ok(list of nested report dicts) - possibly empty - or
    ValidationError / QueryFailed.
    """
    if mode not in MODES:
        return ValidationError(f'Unknown sort mode: {mode!r}')
    if status is not None and status not in STATUSES:
        return ValidationError(f'Unknown status: {status!r}')

    request = compose_report_query(criteria, status=status, tz=tz)
    try:
        rows = store.select(request.table, columns=request.columns,
                            joins=request.joins,
                            predicates=request.predicates,
                            order=request.order)
        reports = [normalize_report(row) for row in rows]
    except StoreError as e:
        logger.error('Report query failed: %s', e)
        return QueryFailed(str(e))
    except (KeyError, ValueError) as e:
        logger.error('Report query returned malformed row: %s', e)
        return QueryFailed(f'Malformed report data: {e}')

    return Ok(sort_reports(reports, mode))


def fetch_today_reports(store, mode=MODE_TRIAGE, tz=None, today=None):
    """Reports created today (local time), triage order by default."""
    day = today or local_today(tz)
    return fetch_reports(store, FilterCriteria(date=day), mode=mode, tz=tz)
