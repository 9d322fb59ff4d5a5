"""
Shared helpers for the route modules.
"""
from flask import current_app

from facility_admin.services.report_query import location_of
from facility_admin.utils.dates import to_local


def current_zone():
    """Zone used for 'today' and date filters."""
    return current_app.config.get('REPORT_ZONE')


def format_local_time(dt, fmt='%H:%M:%S'):
    if dt is None:
        return ''
    return to_local(dt, current_zone()).strftime(fmt)


def register_template_helpers(app):
    app.add_template_filter(format_local_time, 'localtime')
    app.add_template_global(location_of, 'location_of')
