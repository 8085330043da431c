"""Tests for payment commands."""

import pytest

from paytrack.cli.main import cli


@pytest.fixture
def db_args(temp_store):
    """Global options pointing the CLI at the test store and app ID."""
    return ["--db-path", temp_store.database_path, "--app-id", "test-app"]


def _created_id(output):
    """Extract the payment ID from output like 'Created payment abc123'."""
    for line in output.split("\n"):
        if line.startswith("Created payment "):
            return line.split("Created payment ")[1].strip()
    return None


@pytest.fixture
def created_payment(cli_runner, db_args, sample_project, sample_vendor):
    """Create a planned payment through the CLI and return its ID."""
    result = cli_runner.invoke(
        cli,
        db_args
        + [
            "payment", "create",
            "--project", "Site A",
            "--vendor", "ACME Electric",
            "--item", "Wiring",
            "--amount", "15000",
            "--date", "2024-05-01",
            "--status", "planned",
        ],
    )
    assert result.exit_code == 0, result.output
    payment_id = _created_id(result.output)
    assert payment_id is not None
    return payment_id


def test_payment_create_and_show(cli_runner, db_args, created_payment):
    """Test creating a payment and showing all its fields."""
    result = cli_runner.invoke(cli, db_args + ["payment", "show", created_payment])

    assert result.exit_code == 0
    assert f"Payment ID: {created_payment}" in result.output
    assert "Project: Site A" in result.output
    assert "Vendor: ACME Electric" in result.output
    assert "Item: Wiring" in result.output
    assert "Amount: ¥15,000" in result.output
    assert "Expected date: 2024-05-01" in result.output
    assert "Status: Planned" in result.output
    assert "Created:" in result.output


def test_payment_create_with_formatted_amount(cli_runner, db_args):
    """Test that currency symbols and separators are accepted in --amount."""
    result = cli_runner.invoke(
        cli, db_args + ["payment", "create", "--item", "Deposit", "--amount", "¥1,250,000"]
    )
    assert result.exit_code == 0
    payment_id = _created_id(result.output)

    result = cli_runner.invoke(cli, db_args + ["payment", "show", payment_id])
    assert "Amount: ¥1,250,000" in result.output
    assert "Status: Draft" in result.output


def test_payment_create_invalid_amount(cli_runner, db_args):
    """Test that an unparseable amount is rejected before saving."""
    result = cli_runner.invoke(
        cli, db_args + ["payment", "create", "--item", "Wiring", "--amount", "lots"]
    )

    assert result.exit_code == 1
    assert "Invalid amount format" in result.output

    result = cli_runner.invoke(cli, db_args + ["payment", "list"])
    assert "No payments found" in result.output


def test_payment_create_invalid_date(cli_runner, db_args):
    """Test that an unparseable date is rejected."""
    result = cli_runner.invoke(
        cli, db_args + ["payment", "create", "--item", "Wiring", "--date", "someday soon"]
    )

    assert result.exit_code == 1
    assert "Invalid date format" in result.output


def test_payment_create_unknown_project(cli_runner, db_args):
    """Test creating a payment for a project that does not exist."""
    result = cli_runner.invoke(
        cli, db_args + ["payment", "create", "--project", "Nowhere", "--item", "Wiring"]
    )

    assert result.exit_code == 1
    assert "Project 'Nowhere' not found" in result.output


def test_payment_list_empty(cli_runner, db_args):
    """Test listing payments when none exist."""
    result = cli_runner.invoke(cli, db_args + ["payment", "list"])

    assert result.exit_code == 0
    assert "No payments found" in result.output


def test_payment_list_ordered_by_date(cli_runner, db_args):
    """Test that payments are listed by expected date, latest first."""
    for item, expected in [("Early", "2024-03-01"), ("Late", "2024-09-01"), ("Middle", "2024-06-01")]:
        cli_runner.invoke(cli, db_args + ["payment", "create", "--item", item, "--date", expected])

    result = cli_runner.invoke(cli, db_args + ["payment", "list"])

    assert result.exit_code == 0
    assert "Found 3 payment(s)" in result.output
    output = result.output
    assert output.index("Late") < output.index("Middle") < output.index("Early")


def test_payment_list_status_filter(cli_runner, db_args, created_payment):
    """Test filtering the payment list by status."""
    cli_runner.invoke(cli, db_args + ["payment", "create", "--item", "Concrete", "--status", "paid"])

    result = cli_runner.invoke(cli, db_args + ["payment", "list", "--status", "paid"])

    assert result.exit_code == 0
    assert "Found 1 payment(s)" in result.output
    assert "Concrete" in result.output
    assert "Wiring" not in result.output


def test_payment_edit_status(cli_runner, db_args, created_payment):
    """Test that editing one option keeps every other field."""
    result = cli_runner.invoke(
        cli, db_args + ["payment", "edit", created_payment[:8], "--status", "confirmed"]
    )

    assert result.exit_code == 0
    assert f"Updated payment {created_payment}" in result.output

    result = cli_runner.invoke(cli, db_args + ["payment", "show", created_payment])
    assert "Status: Confirmed" in result.output
    assert "Item: Wiring" in result.output
    assert "Amount: ¥15,000" in result.output
    assert "Project: Site A" in result.output
    assert "Updated:" in result.output


def test_payment_edit_not_found(cli_runner, db_args):
    """Test editing a payment that does not exist."""
    result = cli_runner.invoke(cli, db_args + ["payment", "edit", "missing", "--status", "paid"])

    assert result.exit_code == 1
    assert "Payment 'missing' not found" in result.output


def test_payment_delete(cli_runner, db_args, created_payment):
    """Test deleting a payment after confirming."""
    result = cli_runner.invoke(
        cli, db_args + ["payment", "delete", created_payment], input="y\n"
    )

    assert result.exit_code == 0
    assert "Deleted payment 'Wiring'" in result.output

    result = cli_runner.invoke(cli, db_args + ["payment", "list"])
    assert "No payments found" in result.output


def test_payment_delete_cancelled(cli_runner, db_args, created_payment):
    """Test that declining the confirmation keeps the payment."""
    result = cli_runner.invoke(
        cli, db_args + ["payment", "delete", created_payment], input="n\n"
    )

    assert result.exit_code == 0
    assert "Deletion cancelled" in result.output

    result = cli_runner.invoke(cli, db_args + ["payment", "list"])
    assert "Wiring" in result.output


def test_payment_keeps_vendor_name_after_vendor_deleted(cli_runner, db_args, created_payment):
    """Test that a payment still shows the vendor name it was saved with."""
    result = cli_runner.invoke(
        cli, db_args + ["vendor", "delete", "ACME Electric"], input="y\n"
    )
    assert result.exit_code == 0

    result = cli_runner.invoke(cli, db_args + ["payment", "show", created_payment])
    assert "Vendor: ACME Electric" in result.output


@pytest.mark.parametrize("amount", ["1e30", "1,000,000,000,000"])
def test_payment_create_rejects_unstorable_amount(cli_runner, db_args, amount):
    """Test that exponent notation and amounts beyond the column range are rejected."""
    result = cli_runner.invoke(
        cli, db_args + ["payment", "create", "--item", "Wiring", "--amount", amount]
    )

    assert result.exit_code == 1
    assert "Invalid amount format" in result.output

    result = cli_runner.invoke(cli, db_args + ["dashboard"])
    assert result.exit_code == 0
    result = cli_runner.invoke(cli, db_args + ["payment", "list"])
    assert result.exit_code == 0
    assert "No payments found" in result.output


def test_payment_largest_amount_is_displayed(cli_runner, db_args):
    """Test that the largest storable amount round-trips through list and dashboard."""
    result = cli_runner.invoke(
        cli, db_args + ["payment", "create", "--item", "Tower", "--amount", "999999999999"]
    )
    assert result.exit_code == 0

    result = cli_runner.invoke(cli, db_args + ["dashboard"])
    assert result.exit_code == 0
    assert "¥999,999,999,999" in result.output


def test_payment_edit_with_unknown_stored_status(cli_runner, db_args, temp_store):
    """Test editing a payment whose stored status is not in the registry."""
    payment_id = temp_store.insert("test-app", "payments", {"item": "Old", "status": "archived"})

    result = cli_runner.invoke(cli, db_args + ["payment", "edit", payment_id, "--item", "Renamed"])

    assert result.exit_code == 0, result.output
    result = cli_runner.invoke(cli, db_args + ["payment", "show", payment_id])
    assert "Item: Renamed" in result.output
    assert "Status: Unknown" in result.output
