import pytest
from flask_jwt_extended import create_access_token

from staffing_api import create_app
from staffing_api.extensions import db
from staffing_api.models.bank_account import EmployeeBankAccountDetails
from staffing_api.models.employee import Employee

ALL_PERMS = ("employee_create", "employee_edit", "employee_delete", "employee_view")


@pytest.fixture(scope="function")
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
    monkeypatch.setenv("DOCUMENTS_ROOT", str(tmp_path / "documents"))
    app = create_app()
    app.config["TESTING"] = True
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope="function")
def client(app):
    return app.test_client()


@pytest.fixture(scope="function")
def token(app):
    def _make(perms=ALL_PERMS, roles=(), identity="hr-user-1"):
        return create_access_token(identity=identity, additional_claims={"perms": list(perms), "roles": list(roles)})
    return _make


@pytest.fixture(scope="function")
def auth(token):
    return {"Authorization": f"Bearer {token()}"}


@pytest.fixture(scope="function")
def make_employee(app):
    counter = {"n": 0}

    def _make(**kw):
        counter["n"] += 1
        e = Employee(reference_id=kw.pop("reference_id", f"CON-{counter['n']:04d}"),
                     display_name=kw.pop("display_name", "Jane Roe"), **kw)
        db.session.add(e); db.session.commit()
        return e
    return _make


@pytest.fixture(scope="function")
def employee(make_employee):
    return make_employee()


@pytest.fixture(scope="function")
def seed_rows(app):
    """Insert bank rows directly, one per (deposit_type, deposit_value) pair."""
    def _seed(employee_id, distribution):
        rows = []
        for i, (dtype, value) in enumerate(distribution):
            b = EmployeeBankAccountDetails(
                employee_id=employee_id, bank_name=f"Bank {i}", account_number=f"1000000{i}0",
                routing_number="021000021", account_type="1", deposit_type=dtype, deposit_value=value,
            )
            db.session.add(b)
            rows.append(b)
        db.session.commit()
        return rows
    return _seed


@pytest.fixture(scope="function")
def make_entry():
    def _entry(deposit_type=1, deposit_value="", account="123456789", **kw):
        d = {
            "bank_name": "First National",
            "account_type": "1",
            "account_number": account,
            "confirm_account_number": account,
            "routing_number": "021000021",
            "confirm_routing_number": "021000021",
            "deposit_type": deposit_type,
            "deposit_value": deposit_value,
        }
        d.update(kw)
        return d
    return _entry
