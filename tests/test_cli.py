from staffing_api.models.employee import Employee

BASE = "/api/v1/employee/bank-account-details"


def test_seed_demo_is_idempotent(app):
    runner = app.test_cli_runner()
    first = runner.invoke(args=["seed-demo", "--reference-id", "EMP-9"])
    second = runner.invoke(args=["seed-demo", "--reference-id", "EMP-9"])
    assert "created" in first.output
    assert "existing" in second.output
    assert Employee.query.filter_by(reference_id="EMP-9").count() == 1


def test_check_reports_broken_set_after_destroy(app, client, auth, employee, seed_rows):
    rows = seed_rows(employee.id, [(2, "500"), (4, None)])
    runner = app.test_cli_runner()

    healthy = runner.invoke(args=["bank-accounts", "check", employee.id])
    assert healthy.exit_code == 0
    assert "ok" in healthy.output

    # deleting the remainder row is allowed, but leaves a lone partial account
    r = client.delete(f"{BASE}/destroy/{rows[1].id}", json={"request_id": "r", "employee_id": employee.id}, headers=auth)
    assert r.status_code == 200

    broken = runner.invoke(args=["bank-accounts", "check", employee.id])
    assert broken.exit_code == 1
    assert "PartialRequiresRemainder" in broken.output


def test_check_flags_lone_remainder(app, employee, seed_rows):
    seed_rows(employee.id, [(4, None)])
    result = app.test_cli_runner().invoke(args=["bank-accounts", "check", employee.id])
    assert result.exit_code == 1
    assert "StoredTypesNotNormalized" in result.output
