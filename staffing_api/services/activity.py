"""
Activity trail for employee bank details.

A snapshot is taken before and after a write; the difference becomes one
``EmployeeActivityLog`` row whose ``change_log`` lists deleted banks,
added banks and changed fields.
"""
from staffing_api.extensions import db
from staffing_api.models.activity import EmployeeActivityLog
from staffing_api.models.bank_account import DepositType, EmployeeBankAccountDetails
from staffing_api.services import repository

TRACKED_FIELDS = (
    "Bank Name",
    "Account Number",
    "Routing Number",
    "Account Type",
    "Deposit Configuration",
    "Deposit Value",
)


def _deposit_label(value):
    try:
        return DepositType(int(value)).label
    except (TypeError, ValueError):
        return "-"


def bank_snapshot(employee_id: str) -> list[dict]:
    rows = repository.find(EmployeeBankAccountDetails, {"employee_id": employee_id}).data
    return [
        {
            "id": b.id,
            "reference_name": b.bank_name,
            "Bank Name": b.bank_name,
            "Account Number": b.account_number,
            "Routing Number": b.routing_number,
            "Account Type": b.account_type,
            "Deposit Configuration": _deposit_label(b.deposit_type),
            "Deposit Value": b.deposit_value,
        }
        for b in rows
    ]


def bank_change_log(before: list[dict], after: list[dict]) -> list[dict]:
    changes = []
    after_ids = {b["id"] for b in after}
    before_by_id = {b["id"]: b for b in before}

    for gone in before:
        if gone["id"] not in after_ids:
            changes.append({
                "label_name": "Bank Name",
                "value": gone.get("reference_name") or "",
                "action_type": EmployeeActivityLog.ACTION_DELETE,
            })

    for bank in after:
        prev = before_by_id.get(bank["id"])
        if prev is None:
            changes.append({
                "label_name": "Bank Name",
                "value": bank.get("reference_name") or "",
                "action_type": EmployeeActivityLog.ACTION_CREATE,
            })
            continue
        for key in TRACKED_FIELDS:
            if prev.get(key) != bank.get(key):
                changes.append({
                    "label_name": key,
                    "old_value": prev.get(key),
                    "new_value": bank.get(key),
                    "action_type": EmployeeActivityLog.ACTION_UPDATE,
                })
    return changes


def record_bank_activity(employee_id, before, after, created_by=None):
    """Add the activity row to the current session; returns None when nothing changed."""
    changes = bank_change_log(before, after)
    if not changes:
        return None
    entry = EmployeeActivityLog(
        employee_id=employee_id,
        referrable_type=EmployeeActivityLog.REFERRABLE_BANK_DETAILS,
        action_type=EmployeeActivityLog.ACTION_UPDATE if before else EmployeeActivityLog.ACTION_CREATE,
        change_log=changes,
        created_by=created_by,
    )
    db.session.add(entry)
    return entry


def record_bank_delete(employee_id, bank: EmployeeBankAccountDetails, created_by=None):
    entry = EmployeeActivityLog(
        employee_id=employee_id,
        referrable_type=EmployeeActivityLog.REFERRABLE_BANK_DETAILS,
        referrable_type_id=bank.id,
        action_type=EmployeeActivityLog.ACTION_DELETE,
        change_log=[{"label_name": "Bank Name", "value": bank.bank_name, "action_type": EmployeeActivityLog.ACTION_DELETE}],
        created_by=created_by,
    )
    db.session.add(entry)
    return entry
