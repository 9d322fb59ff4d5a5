"""Pytest configuration and fixtures."""
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from facility_admin import create_app
from facility_admin.services.db import connect_db, load_schema
from facility_admin.services.store import SqliteStore
from facility_admin.utils.dates import to_store_timestamp

TZ_NAME = 'Asia/Kuala_Lumpur'
TZ = ZoneInfo(TZ_NAME)

BUILDINGS = [
    {'id': 'B1', 'name': 'Blok A'},
    {'id': 'B2', 'name': 'Blok B'},
]

FLOORS = [
    {'id': 'F1', 'floor_name': 'Ground', 'building_id': 'B1'},
    {'id': 'F2', 'floor_name': 'Level 1', 'building_id': 'B1'},
    {'id': 'F3', 'floor_name': 'Ground', 'building_id': 'B2'},
]

ROOMS = [
    {'id': 'R1', 'room_name': 'Lab 1', 'floor_id': 'F1'},
    {'id': 'R2', 'room_name': 'Lab 2', 'floor_id': 'F2'},
    {'id': 'R3', 'room_name': 'Lecture Hall', 'floor_id': 'F2'},
    {'id': 'R4', 'room_name': 'Store', 'floor_id': 'F3'},
]


def local(text):
    """'2026-10-17 10:00' (or with seconds/ms) as an aware Kuala Lumpur time."""
    for fmt in ('%Y-%m-%d %H:%M:%S.%f', '%Y-%m-%d %H:%M:%S', '%Y-%m-%d %H:%M'):
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=TZ)
        except ValueError:
            continue
    raise ValueError(text)


def seed_hierarchy(store):
    for b in BUILDINGS:
        store.insert('building', b)
    for f in FLOORS:
        store.insert('floor', f)
    for r in ROOMS:
        store.insert('room', r)


def add_report(store, report_id, room_id, when, status='pending',
               action_taken=None, name='Aminah', equipment='Projector',
               description='Not turning on'):
    store.insert('report', {
        'id': report_id,
        'name': name,
        'equipment': equipment,
        'description': description,
        'action_taken': action_taken,
        'created_at': to_store_timestamp(local(when) if isinstance(when, str) else when),
        'status': status,
        'room_id': room_id,
    })
    return report_id


@pytest.fixture
def store():
    """In-memory store with the schema and a small hierarchy."""
    conn = connect_db(':memory:')
    load_schema(conn)
    s = SqliteStore(conn)
    seed_hierarchy(s)
    yield s
    conn.close()


@pytest.fixture
def app(tmp_path):
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test',
        'DATABASE_PATH': str(tmp_path / 'reports.db'),
        'REPORT_TIMEZONE': TZ_NAME,
    })
    with app.app_context():
        from facility_admin.services.store import get_store
        seed_hierarchy(get_store())
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_store(app):
    """Store on the app's database, inside an app context."""
    from facility_admin.services.store import get_store
    with app.app_context():
        yield get_store()
