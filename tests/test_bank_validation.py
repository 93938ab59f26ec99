import uuid

import pytest

from staffing_api.common.errors import ValidationError
from staffing_api.extensions import db
from staffing_api.models.document import InvitedEmployeeDocument, TempUploadDocument
from staffing_api.services.bank_validation import validate_bank_set, validate_destroy, validate_index


def _payload(employee, entries, **kw):
    d = {"request_id": "req-1", "employee_id": employee.id, "bank_information": entries}
    d.update(kw)
    return d


def _message(payload, **kw):
    with pytest.raises(ValidationError) as ei:
        validate_bank_set(payload, **kw)
    return ei.value.message


def test_valid_set_is_cleaned(employee, make_entry):
    bank_set = validate_bank_set(_payload(employee, [make_entry(deposit_type="2", deposit_value=" 500 ", bank_name=" Chase ")]))
    entry = bank_set.entries[0]
    assert bank_set.employee_id == employee.id
    assert entry["deposit_type"] == 2
    assert entry["deposit_value"] == "500"
    assert entry["bank_name"] == "Chase"
    assert entry["id"] is None
    assert bank_set.delete_ids == []


def test_request_id_required(employee, make_entry):
    assert _message(_payload(employee, [make_entry()], request_id=" ")) == "Request Id is required"


def test_employee_checks(app, make_entry):
    assert _message({"request_id": "r", "employee_id": "", "bank_information": []}) == "Employee Id is required"
    assert _message({"request_id": "r", "employee_id": "42", "bank_information": []}) == "Employee Id is invalid"
    missing = str(uuid.uuid4())
    assert _message({"request_id": "r", "employee_id": missing, "bank_information": []}) == "Employee Id does not exist"


def test_bank_information_must_be_list(employee):
    assert _message(_payload(employee, {"bank_name": "x"})) == "Bank information must be a list of bank accounts"


def test_confirm_account_checked_before_distribution(employee, make_entry):
    # remainder-led set would fail distribution; the mismatch must win
    entries = [make_entry(deposit_type=4), make_entry(deposit_type=2, confirm_account_number="999999999")]
    assert _message(_payload(employee, entries)) == "Account number and confirm account number must match"


@pytest.mark.parametrize("override,message", [
    ({"bank_name": ""}, "Bank name is required"),
    ({"bank_name": "Bank <script>"}, "Bank name must not contain special characters"),
    ({"bank_name": "B"}, "Bank name must be between 2 and 100 characters"),
    ({"account_type": " "}, "Account type is required"),
    ({"account_number": "12AB5678", "confirm_account_number": "12AB5678"}, "Account number must contain digits only"),
    ({"account_number": "1234567", "confirm_account_number": "1234567"}, "Account number must be between 8 and 12 digits"),
    ({"routing_number": "02100-021"}, "Routing number must be alphanumeric"),
    ({"routing_number": "0210000", "confirm_routing_number": "0210000"}, "Routing number must be 9 characters"),
    ({"confirm_routing_number": "021000022"}, "Routing number and confirm routing number must match"),
    ({"deposit_type": ""}, "Deposit type is required"),
    ({"deposit_type": 7}, "Deposit type must be one of 1 (Full), 2 (Partial), 3 (Percentage), 4 (Remainder)"),
    ({"deposit_type": 2, "deposit_value": "-5"}, "Deposit value must be a positive number"),
    ({"deposit_type": 3, "deposit_value": "120"}, "Deposit percentage must be between 0 and 100"),
    ({"deposit_type": "03", "deposit_value": "abc"}, "Deposit value must be a positive number"),
    ({"deposit_type": "02", "deposit_value": "-50"}, "Deposit value must be a positive number"),
    ({"deposit_type": "03", "deposit_value": "120"}, "Deposit percentage must be between 0 and 100"),
    ({"deposit_type": 2, "deposit_value": "0"}, "Deposit value must be a positive number"),
    ({"deposit_type": "2", "deposit_value": "0.00"}, "Deposit value must be a positive number"),
    ({"void_cheque_documents": "abc"}, "Documents must be a list"),
    ({"void_cheque_documents": [{"new_document_id": "nope"}]}, "Void cheque document Id is invalid"),
    ({"deposit_form_documents": [{"new_document_id": str(uuid.uuid4())}]}, "Deposit form document does not exist"),
])
def test_entry_rules(employee, make_entry, override, message):
    assert _message(_payload(employee, [make_entry(**override)])) == message


def test_zero_percentage_allowed(employee, make_entry):
    bank_set = validate_bank_set(_payload(employee, [make_entry(deposit_type="03", deposit_value="0"), make_entry(deposit_type=4)]))
    assert [(e["deposit_type"], e["deposit_value"]) for e in bank_set.entries] == [(3, "0"), (4, "")]


def test_remainder_value_is_not_validated(employee, make_entry):
    bank_set = validate_bank_set(_payload(employee, [make_entry(deposit_type=3, deposit_value="60"), make_entry(deposit_type=4, deposit_value="999")]))
    assert bank_set.entries[1]["deposit_value"] == "999"


def test_first_failing_field_wins_across_entries(employee, make_entry):
    # bank_name rules run for every entry before account_type rules
    entries = [make_entry(account_type=""), make_entry(bank_name="")]
    assert _message(_payload(employee, entries)) == "Bank name is required"


def test_pending_documents_resolve(employee, make_entry):
    temp = TempUploadDocument(document_name="void.pdf", document_path="temp/void.pdf")
    invited = InvitedEmployeeDocument(document_name="form.pdf", document_path="invite/form.pdf")
    db.session.add_all([temp, invited]); db.session.commit()

    entry = make_entry(
        void_cheque_documents=[{"new_document_id": temp.id, "slug": ""}],
        deposit_form_documents=[{"new_document_id": invited.id, "slug": "invite_via_link"}],
    )
    bank_set = validate_bank_set(_payload(employee, [entry]))
    assert bank_set.entries[0]["void_cheque_documents"] == [{"new_document_id": temp.id, "slug": ""}]

    # an invite upload is not found among temp uploads
    wrong = make_entry(deposit_form_documents=[{"new_document_id": invited.id, "slug": ""}])
    assert _message(_payload(employee, [wrong])) == "Deposit form document does not exist"


def test_entry_id_must_belong_to_employee(make_employee, seed_rows, make_entry):
    owner, other = make_employee(), make_employee()
    row = seed_rows(other.id, [(1, None)])[0]
    entry = make_entry(bank_account_details_id=row.id)
    assert _message(_payload(owner, [entry])) == "Bank account details do not belong to this employee"
    assert _message(_payload(owner, [make_entry(id=99999)])) == "Bank account details Id does not exist"


def test_update_path_uses_given_employee(make_employee, seed_rows, make_entry):
    owner = make_employee()
    row = seed_rows(owner.id, [(1, None)])[0]
    payload = {"request_id": "r", "bank_information": [make_entry(bank_account_details_id=str(row.id))]}
    bank_set = validate_bank_set(payload, employee_id=owner.id)
    assert bank_set.entries[0]["id"] == row.id
    assert bank_set.new_entries == []


def test_delete_ids_checked(make_employee, seed_rows, make_entry):
    owner, other = make_employee(), make_employee()
    mine = seed_rows(owner.id, [(1, None)])[0]
    theirs = seed_rows(other.id, [(1, None)])[0]
    ok_set = validate_bank_set(_payload(owner, [make_entry()], delete_bank_accounts=[mine.id, ""]))
    assert ok_set.delete_ids == [mine.id]
    assert _message(_payload(owner, [make_entry()], delete_bank_accounts=[theirs.id])) == \
        "Bank account details do not belong to this employee"


def test_destroy_and_index_rules(make_employee, seed_rows):
    owner = make_employee()
    row = seed_rows(owner.id, [(1, None)])[0]
    emp, found = validate_destroy({"request_id": "r", "employee_id": owner.id}, str(row.id))
    assert (emp.id, found.id) == (owner.id, row.id)

    with pytest.raises(ValidationError) as ei:
        validate_destroy({"request_id": "r", "employee_id": owner.id}, "abc")
    assert ei.value.message == "Bank account details Id is invalid"

    with pytest.raises(ValidationError):
        validate_index({"employee_id": owner.id})
    assert validate_index({"request_id": "r", "employee_id": owner.id}).id == owner.id


def test_entry_id_used_once_per_set(make_employee, seed_rows, make_entry):
    owner = make_employee()
    row = seed_rows(owner.id, [(2, "500"), (4, None)])[0]
    entries = [
        make_entry(deposit_type=2, deposit_value="500", bank_account_details_id=row.id),
        make_entry(deposit_type=2, deposit_value="100", id=str(row.id)),
    ]
    assert _message({"request_id": "r", "bank_information": entries}, employee_id=owner.id) == \
        "Bank account details Id appears more than once"


def test_entry_id_cannot_also_be_deleted(make_employee, seed_rows, make_entry):
    owner = make_employee()
    row = seed_rows(owner.id, [(1, None)])[0]
    payload = {"request_id": "r", "bank_information": [make_entry(bank_account_details_id=row.id)],
               "delete_bank_accounts": [row.id]}
    assert _message(payload, employee_id=owner.id) == "Bank account details Id cannot be updated and deleted together"


def test_repeated_delete_ids_collapse(make_employee, seed_rows, make_entry):
    owner = make_employee()
    mine = seed_rows(owner.id, [(1, None)])[0]
    bank_set = validate_bank_set(_payload(owner, [make_entry()], delete_bank_accounts=[mine.id, str(mine.id)]))
    assert bank_set.delete_ids == [mine.id]
