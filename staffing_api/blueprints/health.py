from flask import Blueprint
from sqlalchemy import text

from staffing_api.common.http import ok, fail
from staffing_api.extensions import db

bp = Blueprint("health", __name__, url_prefix="/api")


@bp.get("/health")
def health():
    try:
        db.session.execute(text("SELECT 1"))
    except Exception as e:
        return fail("Database unavailable", status=503, detail=str(e))
    return ok({"db": True})
