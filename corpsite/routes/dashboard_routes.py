from flask import Blueprint, current_app

from corpsite.extensions import db
from corpsite.guards import admin_required
from corpsite.responses import success_response
from corpsite.services.dashboard import DashboardReporter

dashboard_bp = Blueprint("dashboard", __name__)


@dashboard_bp.route("/counts", methods=["GET"])
@admin_required
def dashboard_counts():
    """Every dashboard figure in one call."""
    app = current_app._get_current_object()
    reporter = DashboardReporter(app, db, max_workers=app.config["DASHBOARD_WORKERS"])
    return success_response(data=reporter.build())
