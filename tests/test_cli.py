"""End-to-end tests for the croissant CLI."""

import sqlite3
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from typer.testing import CliRunner

from croissant.cli import app
from croissant.config import get_config_path, load_settings
from croissant.store import fetch_categories, fetch_transactions, get_db_path

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    return tmp_path


@pytest.fixture
def initialized() -> None:
    result = runner.invoke(app, ["init"])
    assert result.exit_code == 0, result.output


class TestInit:
    """Tests for the init command."""

    def test_creates_database_and_config(self) -> None:
        """Should create both files."""
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert get_db_path().exists()
        assert get_config_path().exists()

    def test_refuses_to_overwrite(self, initialized: None) -> None:
        """Should fail without --force when files exist."""
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_force_resets_data(self, initialized: None) -> None:
        """Should start from an empty database with --force."""
        runner.invoke(app, ["add", "10"])

        result = runner.invoke(app, ["init", "--force"])

        assert result.exit_code == 0
        assert fetch_transactions(get_db_path()) == []

    def test_commands_require_init(self) -> None:
        """Should ask the user to run init first."""
        result = runner.invoke(app, ["list"])

        assert result.exit_code == 1
        assert "croissant init" in result.output


class TestTransactionCommands:
    """Tests for add, edit, delete and list."""

    def test_add_income(self, initialized: None) -> None:
        """Should save a positive amount with default currency and today's date."""
        result = runner.invoke(app, ["add", "200", "--note", "Salary"])

        assert result.exit_code == 0, result.output
        [txn] = fetch_transactions(get_db_path())
        assert txn.amount == Decimal("200")
        assert txn.currency == "MYR"
        assert txn.date == date.today()
        assert txn.note == "Salary"
        assert txn.category is None

    def test_add_negative_amount_after_separator(self, initialized: None) -> None:
        """Should accept negative amounts after --."""
        result = runner.invoke(app, ["add", "--date", "2025-03-05", "--", "-12.50"])

        assert result.exit_code == 0, result.output
        [txn] = fetch_transactions(get_db_path())
        assert txn.amount == Decimal("-12.50")
        assert txn.date == date(2025, 3, 5)

    def test_add_expense_flag(self, initialized: None) -> None:
        """Should negate the amount with --expense."""
        runner.invoke(app, ["add", "30", "--expense"])

        [txn] = fetch_transactions(get_db_path())
        assert txn.amount == Decimal("-30")

    def test_add_day_first_date(self, initialized: None) -> None:
        """Should parse DD/MM/YYYY dates."""
        runner.invoke(app, ["add", "5", "--date", "05/03/2025"])

        [txn] = fetch_transactions(get_db_path())
        assert txn.date == date(2025, 3, 5)

    def test_add_invalid_date(self, initialized: None) -> None:
        """Should reject unparsable dates."""
        result = runner.invoke(app, ["add", "5", "--date", "not a date"])

        assert result.exit_code == 1
        assert fetch_transactions(get_db_path()) == []

    def test_add_invalid_amount_records_zero(self, initialized: None) -> None:
        """Should default an unparsable amount to zero."""
        result = runner.invoke(app, ["add", "lots"])

        assert result.exit_code == 0
        assert "not understood" in result.output
        [txn] = fetch_transactions(get_db_path())
        assert txn.amount == 0

    def test_add_non_finite_amount_warns(self, initialized: None) -> None:
        """Should warn when a non-finite amount is recorded as zero."""
        result = runner.invoke(app, ["add", "nan"])

        assert result.exit_code == 0
        assert "not understood" in result.output
        [txn] = fetch_transactions(get_db_path())
        assert txn.amount == 0

    def test_add_out_of_range_amount_keeps_dashboard_working(self, initialized: None) -> None:
        """Should record huge amounts as zero so reports still render."""
        for _ in range(2):
            result = runner.invoke(app, ["add", "--", "-9e999999"])
            assert "not understood" in result.output

        result = runner.invoke(app, ["dashboard"])

        assert result.exit_code == 0, result.output
        assert "Monthly expenses:" in result.output

    def test_add_with_existing_category(self, initialized: None) -> None:
        """Should attach an existing category by name."""
        runner.invoke(app, ["category", "add", "Food"])

        runner.invoke(app, ["add", "12", "-x", "--category", "food"])

        [txn] = fetch_transactions(get_db_path())
        assert txn.category is not None
        assert txn.category.name == "Food"

    def test_add_creates_missing_category_on_confirm(self, initialized: None) -> None:
        """Should offer to create an unknown category."""
        result = runner.invoke(app, ["add", "12", "-x", "--category", "Travel"], input="y\n")

        assert result.exit_code == 0, result.output
        assert [c.name for c in fetch_categories(get_db_path())] == ["Travel"]
        [txn] = fetch_transactions(get_db_path())
        assert txn.category is not None

    def test_add_without_category_on_decline(self, initialized: None) -> None:
        """Should save uncategorized when the user declines."""
        runner.invoke(app, ["add", "12", "-x", "--category", "Travel"], input="n\n")

        assert fetch_categories(get_db_path()) == []
        [txn] = fetch_transactions(get_db_path())
        assert txn.category is None

    def test_edit(self, initialized: None) -> None:
        """Should update fields and keep the id."""
        runner.invoke(app, ["category", "add", "Food"])
        runner.invoke(app, ["add", "10", "--note", "lunch"])
        [txn] = fetch_transactions(get_db_path())

        result = runner.invoke(
            app,
            ["edit", txn.id[:8], "--amount", "15", "--expense", "--category", "Food", "--currency", "SGD", "--note", ""],
        )

        assert result.exit_code == 0, result.output
        [edited] = fetch_transactions(get_db_path())
        assert edited.id == txn.id
        assert edited.amount == Decimal("-15")
        assert edited.currency == "SGD"
        assert edited.note is None
        assert edited.category is not None and edited.category.name == "Food"

    def test_edit_uncategorize(self, initialized: None) -> None:
        """Should remove the category reference."""
        runner.invoke(app, ["category", "add", "Food"])
        runner.invoke(app, ["add", "10", "-x", "-c", "Food"])
        [txn] = fetch_transactions(get_db_path())

        runner.invoke(app, ["edit", txn.id, "--uncategorize"])

        [edited] = fetch_transactions(get_db_path())
        assert edited.category is None

    def test_edit_unknown(self, initialized: None) -> None:
        """Should fail for an unknown id."""
        result = runner.invoke(app, ["edit", "nope", "--amount", "1"])

        assert result.exit_code == 1
        assert "No transaction" in result.output

    def test_delete(self, initialized: None) -> None:
        """Should remove the transaction."""
        runner.invoke(app, ["add", "10"])
        [txn] = fetch_transactions(get_db_path())

        result = runner.invoke(app, ["delete", txn.id[:8]])

        assert result.exit_code == 0
        assert fetch_transactions(get_db_path()) == []

    def test_list(self, initialized: None) -> None:
        """Should show transactions with signed amounts."""
        runner.invoke(app, ["add", "200"])
        runner.invoke(app, ["add", "50", "-x"])

        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        assert "+MYR 200.00" in result.output
        assert "-MYR 50.00" in result.output
        assert "Net:" in result.output

    def test_list_empty(self, initialized: None) -> None:
        """Should say when there are no transactions."""
        result = runner.invoke(app, ["list"])

        assert "No transactions found" in result.output


class TestCategoryCommands:
    """Tests for the category sub-commands."""

    def test_add_with_budget(self, initialized: None) -> None:
        """Should save the name and budget limit."""
        result = runner.invoke(app, ["category", "add", "Food", "--budget", "100"])

        assert result.exit_code == 0
        [category] = fetch_categories(get_db_path())
        assert category.name == "Food"
        assert category.budget_limit == Decimal("100")

    def test_add_duplicate(self, initialized: None) -> None:
        """Should refuse a duplicate name."""
        runner.invoke(app, ["category", "add", "Food"])

        result = runner.invoke(app, ["category", "add", "food"])

        assert result.exit_code == 1
        assert len(fetch_categories(get_db_path())) == 1

    def test_edit_name_and_budget(self, initialized: None) -> None:
        """Should rename and change the budget, keeping the id."""
        runner.invoke(app, ["category", "add", "Food", "--budget", "100"])
        [before] = fetch_categories(get_db_path())

        runner.invoke(app, ["category", "edit", "Food", "--name", "Groceries", "--no-budget"])

        [after] = fetch_categories(get_db_path())
        assert after.id == before.id
        assert after.name == "Groceries"
        assert after.budget_limit is None

    def test_delete_keeps_transactions(self, initialized: None) -> None:
        """Should uncategorize transactions rather than deleting them."""
        runner.invoke(app, ["category", "add", "Food"])
        runner.invoke(app, ["add", "10", "-x", "-c", "Food"])

        result = runner.invoke(app, ["category", "delete", "Food"])

        assert result.exit_code == 0
        assert "1 transaction(s) are now uncategorized" in result.output
        [txn] = fetch_transactions(get_db_path())
        assert txn.category is None

    def test_list_shows_spend_and_over_budget(self, initialized: None) -> None:
        """Should show magnitude of spend and flag categories at budget."""
        runner.invoke(app, ["category", "add", "Food", "--budget", "100"])
        runner.invoke(app, ["add", "30", "-x", "-c", "Food"])
        runner.invoke(app, ["add", "80", "-x", "-c", "Food"])

        result = runner.invoke(app, ["category", "list"])

        assert result.exit_code == 0
        assert "MYR 110.00" in result.output
        assert "100%" in result.output
        assert "At or over budget: Food" in result.output


class TestDashboard:
    """Tests for the dashboard command."""

    def test_totals_and_breakdown(self, initialized: None) -> None:
        """Should show totals, monthly chart, and category breakdown."""
        runner.invoke(app, ["category", "add", "Food"])
        runner.invoke(app, ["add", "30", "-x", "-c", "Food"])
        runner.invoke(app, ["add", "20", "-x", "-c", "Food"])
        runner.invoke(app, ["add", "10", "-x"])
        runner.invoke(app, ["add", "200"])

        result = runner.invoke(app, ["dashboard"])

        assert result.exit_code == 0, result.output
        assert "MYR 200.00" in result.output
        assert "MYR 60.00" in result.output
        assert "Monthly expenses:" in result.output
        assert "Food" in result.output
        assert "Uncategorized" in result.output

    def test_months_option(self, initialized: None) -> None:
        """Should render the requested number of months."""
        runner.invoke(app, ["add", "10", "-x"])

        result = runner.invoke(app, ["dashboard", "--months", "6"])

        assert result.exit_code == 0
        assert result.output.count("..") >= 6

    def test_rejects_zero_months(self, initialized: None) -> None:
        """Should reject fewer than one month."""
        result = runner.invoke(app, ["dashboard", "--months", "0"])

        assert result.exit_code == 1


class TestSettings:
    """Tests for the settings command."""

    def test_show(self, initialized: None) -> None:
        """Should show current settings."""
        result = runner.invoke(app, ["settings"])

        assert result.exit_code == 0
        assert "month_start_day" in result.output
        assert "MYR" in result.output

    def test_change_month_start_day_refreshes_chart(self, initialized: None) -> None:
        """Should persist the new day and redraw the monthly chart."""
        runner.invoke(app, ["add", "10", "-x"])

        result = runner.invoke(app, ["settings", "--month-start-day", "15"])

        assert result.exit_code == 0, result.output
        assert load_settings().month_start_day == 15
        assert "Monthly expenses:" in result.output
        assert " 15 " in result.output

    def test_chart_refresh_failure_keeps_saved_setting(
        self, initialized: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Should report a failed chart refresh without failing the saved change."""
        runner.invoke(app, ["add", "10", "-x"])

        def broken_fetch(*args: object, **kwargs: object) -> list:
            raise sqlite3.OperationalError("database is locked")

        monkeypatch.setattr("croissant.commands.settings.fetch_transactions", broken_fetch)

        result = runner.invoke(app, ["settings", "--month-start-day", "10"])

        assert result.exit_code == 0, result.output
        assert "Could not refresh the monthly chart" in result.output
        assert "Settings saved" in result.output
        assert load_settings().month_start_day == 10

    def test_rejects_out_of_range_day(self, initialized: None) -> None:
        """Should refuse days outside 1-28."""
        result = runner.invoke(app, ["settings", "--month-start-day", "31"])

        assert result.exit_code == 1
        assert load_settings().month_start_day == 1

    def test_change_currency(self, initialized: None) -> None:
        """Should use the new currency for later transactions."""
        runner.invoke(app, ["settings", "--currency", "EUR"])
        runner.invoke(app, ["add", "10"])

        [txn] = fetch_transactions(get_db_path())
        assert txn.currency == "EUR"


class TestBackup:
    """Tests for the backup command."""

    def test_backup(self, initialized: None, tmp_path: Path) -> None:
        """Should copy the database and config."""
        target = tmp_path / "backups"

        result = runner.invoke(app, ["backup", "--output", str(target)])

        assert result.exit_code == 0
        assert len(list(target.glob("croissant_*.db"))) == 1
        assert len(list(target.glob("config_*.toml"))) == 1
