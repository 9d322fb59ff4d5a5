"""Tests for the report list view state."""
from facility_admin.services.outcomes import (NotFound, Ok, QueryFailed,
                                              ReportChange, ReportRemoved)
from facility_admin.services.report_view import ReportListView


def reports():
    return [
        {'id': 'a', 'status': 'pending', 'action_taken': None},
        {'id': 'b', 'status': 'completed', 'action_taken': 'Fixed'},
    ]


def loaded_view():
    view = ReportListView()
    view.apply_result(view.begin_query(), Ok(reports()))
    return view


def test_latest_result_applied():
    view = ReportListView()
    seq = view.begin_query()
    assert view.loading
    assert view.apply_result(seq, Ok(reports()))
    assert not view.loading
    assert [r['id'] for r in view.reports] == ['a', 'b']


def test_stale_result_discarded():
    view = ReportListView()
    old = view.begin_query()
    new = view.begin_query()
    assert view.apply_result(new, Ok([{'id': 'new', 'status': 'pending'}]))
    assert not view.apply_result(old, Ok(reports()))
    assert [r['id'] for r in view.reports] == ['new']


def test_stale_failure_does_not_clobber():
    view = ReportListView()
    old = view.begin_query()
    new = view.begin_query()
    view.apply_result(new, Ok(reports()))
    view.apply_result(old, QueryFailed('timeout'))
    assert view.error is None
    assert len(view.reports) == 2


def test_failed_query_shows_message_and_empty_list():
    view = loaded_view()
    view.apply_result(view.begin_query(), QueryFailed('connection refused'))
    assert view.reports == []
    assert view.error == 'connection refused'


def test_change_patches_only_changed_fields():
    view = loaded_view()
    view.apply_mutation(Ok(ReportChange('a', {'status': 'completed',
                                              'action_taken': 'Replaced bulb'})))
    assert view.reports[0] == {'id': 'a', 'status': 'completed',
                               'action_taken': 'Replaced bulb'}
    assert view.reports[1] == reports()[1]


def test_removal():
    view = loaded_view()
    view.apply_mutation(Ok(ReportRemoved('b')))
    assert [r['id'] for r in view.reports] == ['a']


def test_failed_mutation_leaves_view():
    view = loaded_view()
    assert not view.apply_mutation(NotFound('a'))
    assert view.reports == reports()
    assert view.notice == 'Report a not found'


def test_counts():
    assert loaded_view().counts() == {'total': 2, 'pending': 1, 'completed': 1}
