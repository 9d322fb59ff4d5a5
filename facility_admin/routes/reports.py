"""
Reports routes - filterable history of all reports plus the
complete / remove actions shared with the dashboard.
"""
from dataclasses import replace

from flask import (Blueprint, current_app, render_template, request,
                   redirect, url_for, flash)

from facility_admin.routes import current_zone
from facility_admin.services.hierarchy import LocationHierarchy, load_hierarchy
from facility_admin.services.lifecycle import (STATUSES, delete_report,
                                               mark_completed)
from facility_admin.services.outcomes import ValidationError
from facility_admin.services.report_query import (MODE_RECENCY, MODES,
                                                  FilterCriteria, fetch_reports,
                                                  parse_criteria)
from facility_admin.services.report_view import ReportListView
from facility_admin.services.store import get_store

reports_bp = Blueprint('reports', __name__, url_prefix='/reports')


def cascade_selection(hierarchy, criteria, previous=None):
    """
    Keep building / floor / room selections consistent.

    - building changed since ``previous``: floor and room reset
    - floor changed since ``previous``: room reset
    - a floor outside the selected building, or a room outside the
      selected floor, is dropped
    """
    floor_id = criteria.floor_id
    room_id = criteria.room_id

    if previous is not None:
        if criteria.building_id != previous.building_id:
            floor_id = None
            room_id = None
        elif floor_id != previous.floor_id:
            room_id = None

    if floor_id is not None and criteria.building_id is not None:
        if floor_id not in {f['id'] for f in hierarchy.floors_of(criteria.building_id)}:
            floor_id = None
            room_id = None

    if room_id is not None and floor_id is not None:
        if room_id not in {r['id'] for r in hierarchy.rooms_of(floor_id)}:
            room_id = None

    return replace(criteria, floor_id=floor_id, room_id=room_id)


def _previous_selection(args):
    """Selection the filter form was rendered with, if the form sent it."""
    if 'prev_building' not in args:
        return None
    return FilterCriteria(
        building_id=args.get('prev_building') or None,
        floor_id=args.get('prev_floor') or None,
    )


def _filter_args(criteria, mode, status):
    """Query-string args that reproduce a listing."""
    args = {}
    if criteria.date:
        args['date'] = criteria.date.isoformat()
    if criteria.building_id:
        args['building'] = criteria.building_id
    if criteria.floor_id:
        args['floor'] = criteria.floor_id
    if criteria.room_id:
        args['room'] = criteria.room_id
    if mode != MODE_RECENCY:
        args['mode'] = mode
    if status:
        args['status'] = status
    return args


def _redirect_back():
    target = request.form.get('next', '')
    if target.startswith('/') and not target.startswith('//'):
        return redirect(target)
    return redirect(url_for('reports.list_reports'))


@reports_bp.route('/')
def list_reports():
    """All reports - filter by date, building, floor, room."""
    store = get_store()
    view = ReportListView()

    mode = request.args.get('mode', MODE_RECENCY)
    status = request.args.get('status') or None

    loaded = load_hierarchy(store)
    if loaded.ok:
        hierarchy = loaded.value
    else:
        hierarchy = LocationHierarchy()
        flash(loaded.message, 'error')

    seq = view.begin_query()
    parsed = parse_criteria(request.args)
    if parsed.ok:
        criteria = cascade_selection(hierarchy, parsed.value,
                                     _previous_selection(request.args))
        view.apply_result(seq, fetch_reports(store, criteria, mode=mode,
                                             status=status, tz=current_zone()))
    else:
        criteria = FilterCriteria()
        view.apply_result(seq, parsed)

    filter_args = _filter_args(criteria, mode, status)
    return render_template('reports/list.html',
                           view=view,
                           counts=view.counts(),
                           criteria=criteria,
                           mode=mode,
                           status=status,
                           modes=MODES,
                           statuses=STATUSES,
                           buildings=hierarchy.buildings,
                           floors=hierarchy.floors_of(criteria.building_id) if criteria.building_id else [],
                           rooms=hierarchy.rooms_of(criteria.floor_id) if criteria.floor_id else [],
                           filter_args=filter_args,
                           current_url=url_for('reports.list_reports', **filter_args),
                           pdf_enabled='pdf' in current_app.blueprints)


@reports_bp.route('/<report_id>/complete', methods=['POST'])
def complete(report_id):
    """Mark a report completed, optionally recording the action taken."""
    result = mark_completed(
        get_store(), report_id,
        action_note=request.form.get('action_taken'),
        confirmed=request.form.get('confirm') == 'yes',
    )
    if result.ok:
        flash('Report marked as completed.', 'success')
    else:
        flash(result.message, 'error')
    return _redirect_back()


@reports_bp.route('/<report_id>/delete', methods=['POST'])
def delete(report_id):
    """Remove a report permanently."""
    result = delete_report(
        get_store(), report_id,
        confirmed=request.form.get('confirm') == 'yes',
    )
    if result.ok:
        flash('Report removed.', 'success')
    elif isinstance(result, ValidationError):
        flash(result.message, 'warning')
    else:
        flash(result.message, 'error')
    return _redirect_back()
