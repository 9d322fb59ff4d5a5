"""
Location hierarchy - buildings, floors and rooms.
Answers containment questions used to keep filter dropdowns consistent.
"""
from facility_admin.services.outcomes import Ok, QueryFailed
from facility_admin.services.store import Order, StoreError


class LocationHierarchy:
    """In-memory index over the building > floor > room chain.

    Rows are plain dicts as returned by the store. Lookups with an
    unknown id give an empty list or None, never an error.
    """

    def __init__(self, buildings=(), floors=(), rooms=()):
        self.buildings = list(buildings)
        self.floors = list(floors)
        self.rooms = list(rooms)
        self._buildings_by_id = {b['id']: b for b in self.buildings}
        self._floors_by_id = {f['id']: f for f in self.floors}
        self._rooms_by_id = {r['id']: r for r in self.rooms}

    def floors_of(self, building_id=None):
        """Floors in a building, or every floor when building_id is None."""
        if building_id is None:
            return list(self.floors)
        return [f for f in self.floors if f['building_id'] == building_id]

    def rooms_of(self, floor_id=None):
        """Rooms on a floor, or every room when floor_id is None."""
        if floor_id is None:
            return list(self.rooms)
        return [r for r in self.rooms if r['floor_id'] == floor_id]

    def building(self, building_id):
        return self._buildings_by_id.get(building_id)

    def floor(self, floor_id):
        return self._floors_by_id.get(floor_id)

    def room(self, room_id):
        return self._rooms_by_id.get(room_id)

    def resolve(self, room_id):
        """
        Walk a room up to its building.
        Returns (building, floor, room); any broken link gives None from
        that level upward.
        """
        room = self.room(room_id)
        floor = self.floor(room['floor_id']) if room else None
        building = self.building(floor['building_id']) if floor else None
        return building, floor, room


def load_hierarchy(store):
    """Read the full hierarchy. Returns Ok(LocationHierarchy) or QueryFailed."""
    try:
        buildings = store.select(
            'building', order=[Order('name', 'asc'), Order('id', 'asc')])
        floors = store.select(
            'floor', order=[Order('rowid', 'asc')])
        rooms = store.select(
            'room', order=[Order('rowid', 'asc')])
    except StoreError as e:
        return QueryFailed(f'Failed to load locations: {e}')
    return Ok(LocationHierarchy(buildings, floors, rooms))
