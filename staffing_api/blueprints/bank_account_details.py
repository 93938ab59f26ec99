from flask import Blueprint, request, current_app

from staffing_api.common.auth import requires_perms, current_actor
from staffing_api.common.http import ok
from staffing_api.services import bank_account_service

bp = Blueprint("bank_account_details", __name__, url_prefix="/api/v1/employee/bank-account-details")


def _json():
    return request.get_json(silent=True, force=True) or {}


@bp.post("/store")
@requires_perms("employee_create")
def store():
    d = _json()
    current_app.logger.info("bank details store request %s", d.get("request_id"))
    rows = bank_account_service.store(d, actor_id=current_actor())
    return ok(rows, status=201, message="Added successfully")


@bp.put("/update/<employee_id>")
@requires_perms("employee_edit")
def update(employee_id):
    d = _json()
    current_app.logger.info("bank details update request %s for %s", d.get("request_id"), employee_id)
    rows = bank_account_service.update(employee_id, d, actor_id=current_actor())
    return ok(rows, message="Updated successfully")


@bp.delete("/destroy/<bid>")
@requires_perms("employee_delete")
def destroy(bid):
    d = _json()
    current_app.logger.info("bank details delete request %s for %s", d.get("request_id"), bid)
    out = bank_account_service.destroy(bid, d, actor_id=current_actor())
    return ok(out, message="Deleted successfully")


@bp.get("/index")
@requires_perms("employee_view")
def index():
    rows = bank_account_service.index(request.args)
    return ok(rows, message="Success")
