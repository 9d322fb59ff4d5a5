"""
JSON API - cascading dropdown options, report listing and the
complete / remove actions for page scripts.

Listing responses echo the caller's ``seq`` so a client can drop a
response that belongs to an older request than the one it last sent.
"""
from flask import Blueprint, jsonify, request

from facility_admin.routes import current_zone
from facility_admin.services.hierarchy import load_hierarchy
from facility_admin.services.lifecycle import delete_report, mark_completed
from facility_admin.services.outcomes import NotFound, ValidationError
from facility_admin.services.report_query import (MODE_RECENCY, fetch_reports,
                                                  location_of, parse_criteria)
from facility_admin.services.store import get_store

api_bp = Blueprint('api', __name__, url_prefix='/api')

BAD_BODY = ValidationError('Request body must be a JSON object')


def _status_code(outcome):
    if isinstance(outcome, ValidationError):
        return 400
    if isinstance(outcome, NotFound):
        return 404
    return 502


def _error(outcome, **extra):
    return jsonify(ok=False, error=outcome.message, **extra), _status_code(outcome)


def _report_json(report):
    building, floor, room = location_of(report)
    return {
        'id': report['id'],
        'name': report['name'],
        'equipment': report['equipment'],
        'description': report['description'],
        'action_taken': report['action_taken'],
        'created_at': report['created_at'].isoformat(),
        'status': report['status'],
        'room_id': report['room_id'],
        'building_name': building,
        'floor_name': floor,
        'room_name': room,
    }


def _json_body():
    """Request body as a dict, {} when absent. None when it is not an object."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    return data if isinstance(data, dict) else None


def _seq():
    try:
        return int(request.args.get('seq', 0))
    except ValueError:
        return 0


@api_bp.route('/floors')
def floors():
    """Floor options for a building (all floors without ?building=)."""
    loaded = load_hierarchy(get_store())
    if not loaded.ok:
        return _error(loaded)
    building_id = request.args.get('building') or None
    return jsonify(ok=True, floors=[
        {'id': f['id'], 'floor_name': f['floor_name'], 'building_id': f['building_id']}
        for f in loaded.value.floors_of(building_id)
    ])


@api_bp.route('/rooms')
def rooms():
    """Room options for a floor (all rooms without ?floor=)."""
    loaded = load_hierarchy(get_store())
    if not loaded.ok:
        return _error(loaded)
    floor_id = request.args.get('floor') or None
    return jsonify(ok=True, rooms=[
        {'id': r['id'], 'room_name': r['room_name'], 'floor_id': r['floor_id']}
        for r in loaded.value.rooms_of(floor_id)
    ])


@api_bp.route('/reports')
def list_reports():
    seq = _seq()
    parsed = parse_criteria(request.args)
    if not parsed.ok:
        return _error(parsed, seq=seq, reports=[])

    result = fetch_reports(get_store(), parsed.value,
                           mode=request.args.get('mode', MODE_RECENCY),
                           status=request.args.get('status') or None,
                           tz=current_zone())
    if not result.ok:
        return _error(result, seq=seq, reports=[])

    return jsonify(ok=True, seq=seq, reports=[_report_json(r) for r in result.value])


@api_bp.route('/reports/<report_id>/complete', methods=['POST'])
def complete(report_id):
    data = _json_body()
    if data is None:
        return _error(BAD_BODY)
    result = mark_completed(get_store(), report_id,
                            action_note=data.get('action_taken'),
                            confirmed=data.get('confirm') is True)
    if not result.ok:
        return _error(result)
    change = result.value
    return jsonify(ok=True, report_id=change.report_id, changed=change.fields)


@api_bp.route('/reports/<report_id>/delete', methods=['POST'])
def delete(report_id):
    data = _json_body()
    if data is None:
        return _error(BAD_BODY)
    result = delete_report(get_store(), report_id,
                           confirmed=data.get('confirm') is True)
    if not result.ok:
        return _error(result)
    return jsonify(ok=True, report_id=result.value.report_id, removed=True)
