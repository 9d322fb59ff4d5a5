"""
PDF routes - download the current report listing as a PDF.
"""
from flask import Blueprint, abort, request, Response

from facility_admin.routes import current_zone
from facility_admin.services.hierarchy import load_hierarchy
from facility_admin.services.outcomes import ValidationError
from facility_admin.services.report_query import (MODE_RECENCY, fetch_reports,
                                                  parse_criteria)
from facility_admin.services.pdf_generator import (generate_pdf_filename,
                                                   generate_reports_pdf)
from facility_admin.services.store import get_store

pdf_bp = Blueprint('pdf', __name__, url_prefix='/pdf')


@pdf_bp.route('/reports')
def download_reports_pdf():
    """Same filters as /reports; returns the listing as an attachment."""
    store = get_store()

    parsed = parse_criteria(request.args)
    if not parsed.ok:
        abort(400, parsed.message)
    criteria = parsed.value

    result = fetch_reports(store, criteria,
                           mode=request.args.get('mode', MODE_RECENCY),
                           status=request.args.get('status') or None,
                           tz=current_zone())
    if not result.ok:
        abort(400 if isinstance(result, ValidationError) else 502, result.message)

    loaded = load_hierarchy(store)
    if not loaded.ok:
        abort(502, loaded.message)

    pdf_bytes = generate_reports_pdf(result.value, criteria, loaded.value)
    if not pdf_bytes:
        abort(500, "Failed to generate PDF")

    filename = generate_pdf_filename(criteria)
    return Response(
        pdf_bytes,
        mimetype='application/pdf',
        headers={
            'Content-Disposition': f'attachment; filename="{filename}"'
        }
    )
