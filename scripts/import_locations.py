#!/usr/bin/env python3
"""
Load buildings, floors and rooms from an Excel workbook.
Uses openpyxl (no pandas dependency).

Expected sheet layout (first sheet, header on row 1):
    Building | Floor | Room

Existing entries are matched by name and reused; only missing ones are
created. Blank Room cells create the building/floor only.

Usage:
    python scripts/import_locations.py locations.xlsx [data/reports.db]
"""
import os
import sys

from openpyxl import load_workbook

from facility_admin.services.db import connect_db, load_schema
from facility_admin.services.store import Predicate, SqliteStore
from facility_admin.utils import generate_id

DEFAULT_DB_PATH = os.environ.get('DATABASE_PATH', 'data/reports.db')


def get_cell_text(value):
    return str(value).strip() if value is not None else ""


def read_rows(excel_path):
    """Yield (building, floor, room) text triples, skipping the header."""
    wb = load_workbook(excel_path, read_only=True, data_only=True)
    ws = wb.active
    print(f"Sheet: {ws.title}")
    for row in ws.iter_rows(min_row=2, max_col=3, values_only=True):
        cells = (list(row) + [None, None, None])[:3]
        building, floor, room = (get_cell_text(v) for v in cells)
        if not building or not floor:
            continue
        yield building, floor, room
    wb.close()


def _find_or_create(store, table, name_column, name, parent=None, prefix=None):
    predicates = [Predicate(name_column, '=', name)]
    if parent:
        predicates.append(Predicate(parent[0], '=', parent[1]))
    existing = store.select(table, predicates=predicates)
    if existing:
        return existing[0]['id'], False

    fields = {'id': generate_id(prefix), name_column: name}
    if parent:
        fields[parent[0]] = parent[1]
    store.insert(table, fields)
    return fields['id'], True


def import_locations(store, rows):
    """Create missing hierarchy entries. Returns counts created per level."""
    created = {'building': 0, 'floor': 0, 'room': 0}
    with store.atomic():
        for building_name, floor_name, room_name in rows:
            building_id, new = _find_or_create(
                store, 'building', 'name', building_name, prefix='bld')
            created['building'] += new

            floor_id, new = _find_or_create(
                store, 'floor', 'floor_name', floor_name,
                parent=('building_id', building_id), prefix='flr')
            created['floor'] += new

            if room_name:
                _, new = _find_or_create(
                    store, 'room', 'room_name', room_name,
                    parent=('floor_id', floor_id), prefix='rm')
                created['room'] += new
    return created


def main(argv):
    if len(argv) < 2:
        print(__doc__)
        return 1

    excel_path = argv[1]
    db_path = argv[2] if len(argv) > 2 else DEFAULT_DB_PATH

    print("Loading Excel file...")
    rows = list(read_rows(excel_path))
    print(f"  Read {len(rows)} rows")

    conn = connect_db(db_path)
    load_schema(conn)
    created = import_locations(SqliteStore(conn), rows)
    conn.close()

    print(f"  Created {created['building']} buildings, "
          f"{created['floor']} floors, {created['room']} rooms")
    return 0


if __name__ == '__main__':
    sys.exit(main(sys.argv))
