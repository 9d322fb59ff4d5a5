"""Tests for the Excel location import script."""
import importlib.util
from pathlib import Path

import pytest
from openpyxl import Workbook

from facility_admin.services.db import connect_db, load_schema
from facility_admin.services.hierarchy import load_hierarchy
from facility_admin.services.store import SqliteStore

SCRIPT = Path(__file__).resolve().parent.parent / 'scripts' / 'import_locations.py'


@pytest.fixture
def script():
    spec = importlib.util.spec_from_file_location('import_locations', SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def workbook(tmp_path):
    wb = Workbook()
    ws = wb.active
    ws.title = 'Locations'
    ws.append(['Building', 'Floor', 'Room'])
    ws.append(['Blok A', 'Ground', 'Lab 1'])
    ws.append(['Blok A', 'Ground', 'Lab 2'])
    ws.append(['Blok A', 'Level 1', None])
    ws.append(['Blok B', 'Ground', 'Store'])
    ws.append([None, None, None])
    path = tmp_path / 'locations.xlsx'
    wb.save(path)
    return path


@pytest.fixture
def empty_store():
    conn = connect_db(':memory:')
    load_schema(conn)
    yield SqliteStore(conn)
    conn.close()


def test_read_rows_skips_header_and_blanks(script, workbook):
    rows = list(script.read_rows(workbook))
    assert rows == [
        ('Blok A', 'Ground', 'Lab 1'),
        ('Blok A', 'Ground', 'Lab 2'),
        ('Blok A', 'Level 1', ''),
        ('Blok B', 'Ground', 'Store'),
    ]


def test_import_builds_hierarchy(script, workbook, empty_store):
    created = script.import_locations(empty_store, script.read_rows(workbook))
    assert created == {'building': 2, 'floor': 3, 'room': 3}

    h = load_hierarchy(empty_store).value
    blok_a = next(b for b in h.buildings if b['name'] == 'Blok A')
    assert [f['floor_name'] for f in h.floors_of(blok_a['id'])] == ['Ground', 'Level 1']
    ground = h.floors_of(blok_a['id'])[0]
    assert [r['room_name'] for r in h.rooms_of(ground['id'])] == ['Lab 1', 'Lab 2']


def test_import_is_repeatable(script, workbook, empty_store):
    script.import_locations(empty_store, script.read_rows(workbook))
    again = script.import_locations(empty_store, script.read_rows(workbook))
    assert again == {'building': 0, 'floor': 0, 'room': 0}
