"""
Store / update / destroy / index for employee bank account details.

Each write is one validate-then-commit transaction over the employee's whole
bank configuration:

1. field rule chains (bank_validation)
2. account ceiling against the live row count
3. deposit distribution rules (deposit_distribution)
4. rows, documents and deletions persisted together, with the activity trail

Two concurrent writes for the same employee can both pass step 2 against the
same count; nothing here serializes them.
"""
from __future__ import annotations

import logging
from datetime import datetime

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from staffing_api.common.errors import DistributionError, DocumentStorageError, PersistenceError, ValidationError
from staffing_api.extensions import db
from staffing_api.models.bank_account import DepositType, EmployeeBankAccountDetails
from staffing_api.services import repository
from staffing_api.services.activity import bank_snapshot, record_bank_activity, record_bank_delete
from staffing_api.services.bank_validation import (
    INT_RE,
    BankAccountSet,
    validate_bank_set,
    validate_destroy,
    validate_index,
)
from staffing_api.services.deposit_distribution import validate_distribution
from staffing_api.services.documents import bank_documents_folder, remove_stored_document, stage_pending_document

log = logging.getLogger(__name__)

MAX_ACCOUNTS_MESSAGE = "An employee can have at most {limit} bank accounts"

# request field -> (url, path, name) columns
DOCUMENT_COLUMNS = {
    "void_cheque_documents": (
        "void_cheque_document_url", "void_cheque_document_path", "void_cheque_document_name",
    ),
    "deposit_form_documents": (
        "deposit_form_document_url", "deposit_form_document_path", "deposit_form_document_name",
    ),
}


def bank_row(b: EmployeeBankAccountDetails) -> dict:
    return {
        "id": b.id,
        "employee_id": b.employee_id,
        "bank_name": b.bank_name,
        "account_number": b.account_number,
        "confirm_account_number": b.account_number,
        "routing_number": b.routing_number,
        "confirm_routing_number": b.routing_number,
        "account_type": b.account_type or "",
        "deposit_type": b.deposit_type,
        "deposit_value": "" if b.deposit_type == DepositType.REMAINDER or b.deposit_value is None else b.deposit_value,
        "description": b.description,
        "void_cheque_documents": [{
            "document_name": b.void_cheque_document_name or "Void Cheque",
            "document_url": b.void_cheque_document_url or "",
            "new_document_id": "",
        }],
        "deposit_form_documents": [{
            "document_name": b.deposit_form_document_name or "Deposit Form",
            "document_url": b.deposit_form_document_url or "",
            "new_document_id": "",
        }],
    }


def check_capacity(bank_set: BankAccountSet) -> None:
    limit = current_app.config.get("MAX_BANK_ACCOUNTS", 5)
    current = repository.count(EmployeeBankAccountDetails, {"employee_id": bank_set.employee_id}).data
    projected = len(bank_set.new_entries) + current - len(bank_set.delete_ids)
    if len(bank_set.entries) > limit or projected > limit:
        raise ValidationError(MAX_ACCOUNTS_MESSAGE.format(limit=limit), code="MaxFiveBankAccounts")


def _row_values(employee_id: str, entry: dict) -> dict:
    return {
        "employee_id": employee_id,
        "bank_name": entry["bank_name"],
        "account_number": entry["account_number"],
        "routing_number": entry["routing_number"],
        "account_type": entry["account_type"],
        "deposit_type": int(entry["deposit_type"]),
        "deposit_value": entry["deposit_value"] or None,
        "description": entry.get("description"),
    }


def _stage_documents(entry: dict, folder: str, existing, staged: list, replaced: list) -> dict:
    values = {}
    for kind, (url_col, path_col, name_col) in DOCUMENT_COLUMNS.items():
        docs = entry.get(kind) or []
        pending = next((d for d in docs if d.get("new_document_id")), None)
        if pending is None:
            continue
        doc = stage_pending_document(pending["new_document_id"], pending.get("slug", ""), folder)
        staged.append(doc)
        if existing is not None and getattr(existing, path_col):
            replaced.append(getattr(existing, path_col))
        values.update({url_col: doc["url"], path_col: doc["path"], name_col: doc["name"]})
    return values


def _discard_staged(staged: list) -> None:
    for doc in staged:
        if doc["created"]:
            remove_stored_document(doc["path"])


def _persist(bank_set: BankAccountSet, entries: list[dict], actor_id=None) -> list[dict]:
    employee = bank_set.employee
    folder = bank_documents_folder(employee.reference_id)
    staged, replaced = [], []
    now = datetime.utcnow()
    try:
        before = bank_snapshot(employee.id)
        saved = []
        for entry in entries:
            existing = None
            if entry.get("id"):
                existing = repository.find(EmployeeBankAccountDetails, {"id": entry["id"]}, limit=1).data[0]
            row = _row_values(employee.id, entry)
            row.update(_stage_documents(entry, folder, existing, staged, replaced))
            if existing is not None:
                row.update(updated_by=actor_id, updated_at=now)
                result = repository.update(EmployeeBankAccountDetails, {"id": existing.id}, row)
            else:
                row.update(created_by=actor_id, created_at=now)
                result = repository.store(EmployeeBankAccountDetails, row)
            saved.extend(result.data)

        for bank_id in bank_set.delete_ids:
            repository.update(
                EmployeeBankAccountDetails,
                {"id": bank_id},
                {"deleted_at": now, "updated_at": now, "updated_by": actor_id},
            )

        record_bank_activity(employee.id, before, bank_snapshot(employee.id), created_by=actor_id)
        db.session.commit()
    except DocumentStorageError:
        db.session.rollback()
        _discard_staged(staged)
        raise
    except SQLAlchemyError as e:
        db.session.rollback()
        _discard_staged(staged)
        log.exception("bank details persistence failed for employee %s", employee.id)
        raise PersistenceError(original=e) from e

    kept = {doc["path"] for doc in staged}
    for doc in staged:
        remove_stored_document(doc["source"])
    for path in replaced:
        if path not in kept:
            remove_stored_document(path)
    return [bank_row(b) for b in saved]


def store(payload: dict, actor_id=None, employee_id=None) -> list[dict]:
    bank_set = validate_bank_set(payload, employee_id=employee_id)
    check_capacity(bank_set)
    entries = validate_distribution(bank_set.entries)
    saved = _persist(bank_set, entries, actor_id)
    log.info(
        "stored %d bank account(s) for employee %s (deleted %d)",
        len(saved), bank_set.employee_id, len(bank_set.delete_ids),
    )
    return saved


def update(employee_id: str, payload: dict, actor_id=None) -> list[dict]:
    """Same pipeline as ``store``; the employee comes from the URL, not the body."""
    return store(payload, actor_id=actor_id, employee_id=employee_id)


def destroy(bank_account_id, payload: dict, actor_id=None) -> dict:
    # remaining rows are not re-checked against the distribution rules
    employee, row = validate_destroy(payload, bank_account_id)
    now = datetime.utcnow()
    try:
        repository.update(
            EmployeeBankAccountDetails,
            {"id": row.id},
            {"deleted_at": now, "updated_at": now, "updated_by": actor_id},
        )
        record_bank_delete(employee.id, row, created_by=actor_id)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        log.exception("bank details delete failed for %s", row.id)
        raise PersistenceError(original=e) from e
    log.info("deleted bank account %s of employee %s", row.id, employee.id)
    return {"id": row.id, "deleted": True}


def index(args) -> list[dict]:
    employee = validate_index(args)
    condition = {"employee_id": employee.id}
    raw_id = str(args.get("id") or "").strip()
    if raw_id:
        if not INT_RE.match(raw_id):
            raise ValidationError("Bank account details Id is invalid")
        condition["id"] = int(raw_id)
    result = repository.find(EmployeeBankAccountDetails, condition)
    return [bank_row(b) for b in result.data]


def distribution_issue(employee_id: str) -> str | None:
    """Key of the distribution rule the employee's live rows break, if any."""
    rows = repository.find(EmployeeBankAccountDetails, {"employee_id": employee_id}).data
    entries = [{"deposit_type": b.deposit_type, "deposit_value": b.deposit_value or ""} for b in rows]
    try:
        normalized = validate_distribution(entries)
    except DistributionError as e:
        return e.key
    # e.g. a lone remainder row left behind by a delete
    if [e["deposit_type"] for e in normalized] != [e["deposit_type"] for e in entries]:
        return "StoredTypesNotNormalized"
    return None
