"""
Dashboard routes - today's submissions, unresolved first.
"""
from flask import Blueprint, render_template

from facility_admin.routes import current_zone
from facility_admin.services.report_query import MODE_TRIAGE, fetch_today_reports
from facility_admin.services.report_view import ReportListView
from facility_admin.services.store import get_store
from facility_admin.utils.dates import local_today

dashboard_bp = Blueprint('dashboard', __name__)


@dashboard_bp.route('/')
def today():
    """Today dashboard - reports created today in triage order."""
    tz = current_zone()
    view = ReportListView()
    seq = view.begin_query()
    view.apply_result(seq, fetch_today_reports(get_store(), mode=MODE_TRIAGE, tz=tz))

    return render_template('dashboard.html',
                           view=view,
                           counts=view.counts(),
                           today=local_today(tz).strftime('%d %B %Y'))
