"""
PDF Generator Service - printable report listings.
Uses WeasyPrint for HTML to PDF conversion.
"""
from datetime import datetime
from flask import render_template, current_app


def _get_weasyprint():
    """Lazy import weasyprint."""
    try:
        from weasyprint import HTML
        return HTML
    except (ImportError, OSError):
        return None


def describe_filters(criteria, hierarchy):
    """Human-readable summary of the active filters for the PDF header."""
    parts = []
    if criteria.date:
        parts.append('Date: {}'.format(criteria.date.strftime('%d %B %Y')))
    if criteria.building_id:
        building = hierarchy.building(criteria.building_id)
        parts.append('Building: {}'.format(building['name'] if building else 'N/A'))
    if criteria.floor_id:
        floor = hierarchy.floor(criteria.floor_id)
        parts.append('Floor: {}'.format(floor['floor_name'] if floor else 'N/A'))
    if criteria.room_id:
        room = hierarchy.room(criteria.room_id)
        parts.append('Room: {}'.format(room['room_name'] if room else 'N/A'))
    return parts or ['All reports']


def generate_reports_pdf(reports, criteria, hierarchy):
    """Render a report listing to PDF bytes. None when WeasyPrint is missing."""
    HTML = _get_weasyprint()
    if HTML is None:
        return None

    html_content = render_template(
        'pdf/report_list.html',
        reports=reports,
        filters=describe_filters(criteria, hierarchy),
        generated_at=datetime.now().strftime('%d.%m.%Y %H:%M'),
    )

    html_doc = HTML(string=html_content, base_url=current_app.static_folder)
    return html_doc.write_pdf()


def generate_pdf_filename(criteria):
    """REPORTS_20261017.pdf for a single day, REPORTS_ALL_<today>.pdf otherwise."""
    if criteria.date:
        return 'REPORTS_{}.pdf'.format(criteria.date.strftime('%Y%m%d'))
    return 'REPORTS_ALL_{}.pdf'.format(datetime.now().strftime('%Y%m%d'))
