"""
Facility Admin - Flask Application Factory
Triage of facility maintenance reports: today's dashboard, filtered
history, complete / remove actions.
"""
import os
from flask import Flask


def create_app(test_config=None):
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'dev-secret-change-in-prod')
    app.config['DATABASE_PATH'] = os.environ.get('DATABASE_PATH', 'data/reports.db')
    # IANA zone for "today" and date filters; empty = server local time
    app.config['REPORT_TIMEZONE'] = os.environ.get('REPORT_TIMEZONE', '')

    if test_config:
        app.config.update(test_config)

    # Unknown zone names fail at startup
    from facility_admin.utils.dates import get_zone
    app.config['REPORT_ZONE'] = get_zone(app.config['REPORT_TIMEZONE'])

    # Initialize database
    from facility_admin.services.db import init_db
    with app.app_context():
        init_db(app)

    # Template helpers
    from facility_admin.routes import register_template_helpers
    register_template_helpers(app)

    # Register blueprints
    from facility_admin.routes.dashboard import dashboard_bp
    from facility_admin.routes.reports import reports_bp
    from facility_admin.routes.api import api_bp

    app.register_blueprint(dashboard_bp)
    app.register_blueprint(reports_bp)
    app.register_blueprint(api_bp)

    # PDF blueprint (optional - requires weasyprint + system libs)
    try:
        from facility_admin.routes.pdf import pdf_bp
        app.register_blueprint(pdf_bp)
    except (ImportError, OSError):
        app.logger.warning('PDF export not available')

    return app


# For direct execution
if __name__ == '__main__':
    app = create_app()
    app.run(debug=True, host='0.0.0.0', port=5000)
