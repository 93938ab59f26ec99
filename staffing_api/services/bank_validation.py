"""
Field level rule chains for the bank account endpoints.

Rules run in declaration order and stop at the first failure, raising
``ValidationError`` with that rule's message. Lookups (employee, bank rows,
pending documents) go through the persistence gateway.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field

from staffing_api.common.errors import ValidationError
from staffing_api.models.bank_account import DepositType, EmployeeBankAccountDetails
from staffing_api.models.document import INVITE_SLUG, InvitedEmployeeDocument, TempUploadDocument
from staffing_api.models.employee import Employee
from staffing_api.services import repository
from staffing_api.services.deposit_distribution import to_decimal

UUID_RE = re.compile(r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$")
SPECIAL_CHARS_RE = re.compile(r'[{}?!"~$%*><|]')
NUMERIC_RE = re.compile(r"^[0-9]*$")
ALNUM_SPACE_RE = re.compile(r"^[a-zA-Z0-9 ]*$")
DECIMAL_RE = re.compile(r"^\d+(\.\d+)?$")
INT_RE = re.compile(r"^\d+$")

MSG = {
    "request_id": "Request Id is required",
    "employee_id_required": "Employee Id is required",
    "employee_id_invalid": "Employee Id is invalid",
    "employee_not_found": "Employee Id does not exist",
    "bank_information_invalid": "Bank information must be a list of bank accounts",
    "entry_invalid": "Each bank account must be an object",
    "confirm_account_mismatch": "Account number and confirm account number must match",
    "bank_id_required": "Bank account details Id is required",
    "bank_id_invalid": "Bank account details Id is invalid",
    "bank_id_not_found": "Bank account details Id does not exist",
    "bank_id_other_employee": "Bank account details do not belong to this employee",
    "bank_name_required": "Bank name is required",
    "bank_name_invalid": "Bank name must not contain special characters",
    "bank_name_length": "Bank name must be between 2 and 100 characters",
    "account_type_required": "Account type is required",
    "account_number_required": "Account number is required",
    "account_number_invalid": "Account number must contain digits only",
    "account_number_length": "Account number must be between 8 and 12 digits",
    "confirm_account_required": "Confirm account number is required",
    "routing_number_required": "Routing number is required",
    "routing_number_invalid": "Routing number must be alphanumeric",
    "routing_number_length": "Routing number must be 9 characters",
    "confirm_routing_required": "Confirm routing number is required",
    "confirm_routing_mismatch": "Routing number and confirm routing number must match",
    "deposit_type_required": "Deposit type is required",
    "deposit_type_invalid": "Deposit type must be one of 1 (Full), 2 (Partial), 3 (Percentage), 4 (Remainder)",
    "deposit_value_invalid": "Deposit value must be a positive number",
    "deposit_percentage_invalid": "Deposit percentage must be between 0 and 100",
    "documents_not_array": "Documents must be a list",
    "void_cheque_documents_id_invalid": "Void cheque document Id is invalid",
    "void_cheque_documents_not_found": "Void cheque document does not exist",
    "deposit_form_documents_id_invalid": "Deposit form document Id is invalid",
    "deposit_form_documents_not_found": "Deposit form document does not exist",
    "delete_id_not_found": "Bank account details Id does not exist",
    "bank_id_duplicate": "Bank account details Id appears more than once",
    "bank_id_deleted": "Bank account details Id cannot be updated and deleted together",
}


@dataclass
class BankAccountSet:
    employee: Employee
    entries: list = field(default_factory=list)
    delete_ids: list = field(default_factory=list)

    @property
    def employee_id(self):
        return self.employee.id

    @property
    def new_entries(self):
        return [e for e in self.entries if not e.get("id")]


def _text(value) -> str:
    return "" if value is None else str(value).strip()


def _reject(key: str, **detail):
    raise ValidationError(MSG[key], payload=detail or None)


# ---------- single value rules ----------

def require_request_id(payload: dict) -> str:
    rid = _text(payload.get("request_id"))
    if not rid:
        _reject("request_id")
    return rid


def existing_employee(value) -> Employee:
    eid = _text(value)
    if not eid:
        _reject("employee_id_required")
    if not UUID_RE.match(eid):
        _reject("employee_id_invalid")
    found = repository.find(Employee, {"id": eid}, limit=1)
    if not found.status:
        _reject("employee_not_found")
    return found.data[0]


def owned_bank_account(value, employee_id: str, not_found="bank_id_not_found") -> EmployeeBankAccountDetails:
    raw = _text(value)
    if not raw:
        _reject("bank_id_required")
    if not INT_RE.match(raw):
        _reject("bank_id_invalid")
    found = repository.find(EmployeeBankAccountDetails, {"id": int(raw)}, limit=1)
    if not found.status:
        _reject(not_found, id=raw)
    row = found.data[0]
    if row.employee_id != employee_id:
        _reject("bank_id_other_employee", id=raw)
    return row


# ---------- per entry rules (run field by field across every entry) ----------

def _entry_id(entry, employee_id):
    raw = entry.get("bank_account_details_id") or entry.get("id")
    if raw in (None, ""):
        return None
    return owned_bank_account(raw, employee_id).id


def _bank_name(entry, _):
    v = _text(entry.get("bank_name"))
    if not v:
        _reject("bank_name_required")
    if SPECIAL_CHARS_RE.search(v):
        _reject("bank_name_invalid")
    if not 2 <= len(v) <= 100:
        _reject("bank_name_length")
    return v


def _account_type(entry, _):
    v = _text(entry.get("account_type"))
    if not v:
        _reject("account_type_required")
    return v


def _account_number(entry, _):
    v = _text(entry.get("account_number"))
    if not v:
        _reject("account_number_required")
    if not NUMERIC_RE.match(v):
        _reject("account_number_invalid")
    if not 8 <= len(v) <= 12:
        _reject("account_number_length")
    # uniqueness across employees is intentionally not enforced
    return v


def _confirm_account_number(entry, _):
    v = _text(entry.get("confirm_account_number"))
    if not v:
        _reject("confirm_account_required")
    return v


def _routing_number(entry, _):
    v = _text(entry.get("routing_number"))
    if not v:
        _reject("routing_number_required")
    if not ALNUM_SPACE_RE.match(v):
        _reject("routing_number_invalid")
    if len(v) != 9:
        _reject("routing_number_length")
    return v


def _confirm_routing_number(entry, _):
    v = _text(entry.get("confirm_routing_number"))
    if not v:
        _reject("confirm_routing_required")
    if v != _text(entry.get("routing_number")):
        _reject("confirm_routing_mismatch")
    return v


def _deposit_type(entry, _):
    v = _text(entry.get("deposit_type"))
    if not v:
        _reject("deposit_type_required")
    if not INT_RE.match(v) or int(v) not in tuple(DepositType):
        _reject("deposit_type_invalid")
    return int(v)


def _deposit_value(entry, employee_id):
    v = _text(entry.get("deposit_value"))
    dtype = _deposit_type(entry, employee_id)
    if not v or dtype not in (DepositType.PARTIAL, DepositType.PERCENTAGE):
        return v
    if not DECIMAL_RE.match(v):
        _reject("deposit_value_invalid")
    if dtype == DepositType.PARTIAL and to_decimal(v) <= 0:
        _reject("deposit_value_invalid")
    if dtype == DepositType.PERCENTAGE and to_decimal(v) > 100:
        _reject("deposit_percentage_invalid")
    return v


def _documents(kind):
    def rule(entry, _):
        docs = entry.get(kind)
        if docs is None:
            return []
        if not isinstance(docs, list):
            _reject("documents_not_array")
        resolved = []
        for doc in docs:
            doc = doc if isinstance(doc, dict) else {"new_document_id": doc}
            new_id = _text(doc.get("new_document_id"))
            slug = _text(doc.get("slug"))
            if not new_id:
                resolved.append({"new_document_id": "", "slug": slug})
                continue
            if not UUID_RE.match(new_id):
                _reject(f"{kind}_id_invalid")
            model = InvitedEmployeeDocument if slug == INVITE_SLUG else TempUploadDocument
            if not repository.find(model, {"id": new_id}, limit=1).status:
                _reject(f"{kind}_not_found")
            resolved.append({"new_document_id": new_id, "slug": slug})
        return resolved
    return rule


ENTRY_RULES = (
    ("id", _entry_id),
    ("bank_name", _bank_name),
    ("account_type", _account_type),
    ("account_number", _account_number),
    ("confirm_account_number", _confirm_account_number),
    ("routing_number", _routing_number),
    ("confirm_routing_number", _confirm_routing_number),
    ("deposit_type", _deposit_type),
    ("deposit_value", _deposit_value),
    ("void_cheque_documents", _documents("void_cheque_documents")),
    ("deposit_form_documents", _documents("deposit_form_documents")),
)


# ---------- request level chains ----------

def validate_bank_set(payload: dict, employee_id=None) -> BankAccountSet:
    """Run the store/update chain and return the cleaned set.

    ``employee_id`` overrides the body value (update path).
    """
    payload = payload or {}
    require_request_id(payload)
    employee = existing_employee(employee_id if employee_id is not None else payload.get("employee_id"))

    raw_entries = payload.get("bank_information")
    if not isinstance(raw_entries, list):
        _reject("bank_information_invalid")
    if not all(isinstance(e, dict) for e in raw_entries):
        _reject("entry_invalid")
    for e in raw_entries:
        if _text(e.get("account_number")) != _text(e.get("confirm_account_number")):
            _reject("confirm_account_mismatch")

    cleaned = [{"description": _text(e.get("description")) or None} for e in raw_entries]
    for name, rule in ENTRY_RULES:
        for raw, out in zip(raw_entries, cleaned):
            out[name] = rule(raw, employee.id)

    # an existing row may back at most one entry
    entry_ids = [e["id"] for e in cleaned if e["id"]]
    if len(entry_ids) != len(set(entry_ids)):
        _reject("bank_id_duplicate")

    delete_ids = []
    for raw in payload.get("delete_bank_accounts") or []:
        if not _text(raw):
            continue
        bank_id = owned_bank_account(raw, employee.id, not_found="delete_id_not_found").id
        if bank_id in entry_ids:
            _reject("bank_id_deleted", id=bank_id)
        if bank_id not in delete_ids:
            delete_ids.append(bank_id)

    return BankAccountSet(employee=employee, entries=cleaned, delete_ids=delete_ids)


def validate_destroy(payload: dict, bank_account_id):
    payload = payload or {}
    require_request_id(payload)
    employee = existing_employee(payload.get("employee_id"))
    row = owned_bank_account(bank_account_id, employee.id)
    return employee, row


def validate_index(args) -> Employee:
    require_request_id(args)
    return existing_employee(args.get("employee_id"))
