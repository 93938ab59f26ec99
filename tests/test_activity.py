from staffing_api.models.activity import EmployeeActivityLog
from staffing_api.services.activity import bank_change_log, bank_snapshot, record_bank_activity


def _bank(id, name="Chase", **kw):
    d = {"id": id, "reference_name": name, "Bank Name": name, "Account Number": "123456789",
         "Routing Number": "021000021", "Account Type": "1", "Deposit Configuration": "Full Net", "Deposit Value": None}
    d.update(kw)
    return d


def test_change_log_add_update_delete():
    before = [_bank(1, "Chase"), _bank(2, "Citi")]
    after = [_bank(1, "Chase", **{"Deposit Configuration": "Partial $", "Deposit Value": "500"}), _bank(3, "Wells")]
    changes = bank_change_log(before, after)

    deleted = [c for c in changes if c["action_type"] == EmployeeActivityLog.ACTION_DELETE]
    added = [c for c in changes if c["action_type"] == EmployeeActivityLog.ACTION_CREATE]
    updated = {c["label_name"]: (c["old_value"], c["new_value"])
               for c in changes if c["action_type"] == EmployeeActivityLog.ACTION_UPDATE}

    assert [c["value"] for c in deleted] == ["Citi"]
    assert [c["value"] for c in added] == ["Wells"]
    assert updated == {"Deposit Configuration": ("Full Net", "Partial $"), "Deposit Value": (None, "500")}


def test_no_changes_no_row(app, employee):
    snap = [_bank(1)]
    assert record_bank_activity(employee.id, snap, snap) is None


def test_snapshot_labels(employee, seed_rows):
    seed_rows(employee.id, [(3, "60"), (4, "40")])
    snap = bank_snapshot(employee.id)
    assert [s["Deposit Configuration"] for s in snap] == ["Partial %", "Remainder"]
    assert snap[0]["Deposit Value"] == "60"
