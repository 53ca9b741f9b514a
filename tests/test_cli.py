"""End-to-end tests for the finflex command line."""

import sqlite3
from datetime import date, datetime, timedelta
from pathlib import Path

import pytest
from typer.testing import CliRunner

from finflex.cli import app
from finflex.commands import transactions
from finflex.commands.common import entry_timestamp, parse_entry_date
from finflex.config import get_config_path, save_config
from finflex.dates import local_datetime, to_timestamp
from finflex.store import load_profile, load_transactions
from finflex.store.schema import get_db_path

runner = CliRunner()


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    return tmp_path


@pytest.fixture
def onboarded(home: Path) -> Path:
    assert runner.invoke(app, ["init"]).exit_code == 0
    result = runner.invoke(
        app,
        [
            "onboard",
            "--name", "Asha",
            "--income", "60000",
            "--fixed-costs", "20000",
            "--yearly-goal", "120000",
            "--monthly-target", "10000",
            "--risk", "medium",
        ],
    )
    assert result.exit_code == 0, result.output
    return get_db_path()


class TestParseEntryDate:
    """Tests for parse_entry_date."""

    def test_iso_and_day_first(self) -> None:
        """Should read ISO dates and day-first dates."""
        assert parse_entry_date("2025-06-03") == date(2025, 6, 3)
        assert parse_entry_date("03/06/2025") == date(2025, 6, 3)

    def test_iso_day_not_swapped(self) -> None:
        """Should keep month and day in order for ISO dates with a small day."""
        assert parse_entry_date("2026-10-05") == date(2026, 10, 5)
        assert parse_entry_date(" 2025-01-12 ") == date(2025, 1, 12)
        assert parse_entry_date("2025-02-03T09:30:00") == date(2025, 2, 3)

    def test_empty(self) -> None:
        """Should raise ValueError for an empty string."""
        with pytest.raises(ValueError):
            parse_entry_date("")

    def test_garbage(self) -> None:
        """Should raise ValueError for text that is not a date."""
        with pytest.raises(ValueError):
            parse_entry_date("not a date")


class TestEntryTimestamp:
    """Tests for entry_timestamp."""

    def test_today_uses_now(self) -> None:
        """Should record the current instant for today."""
        now = datetime(2025, 6, 15, 14, 30)

        assert entry_timestamp(None, now) == to_timestamp(now)
        assert entry_timestamp(date(2025, 6, 15), now) == to_timestamp(now)

    def test_backdated_uses_midnight(self) -> None:
        """Should log earlier days at local midnight."""
        now = datetime(2025, 6, 15, 14, 30)

        assert entry_timestamp(date(2025, 6, 10), now) == to_timestamp(datetime(2025, 6, 10))


class TestInitAndOnboard:
    """Tests for init and onboard."""

    def test_commands_need_database(self, home: Path) -> None:
        """Should ask for init first."""
        result = runner.invoke(app, ["status"])

        assert result.exit_code == 1
        assert "finflex init" in result.output

    def test_commands_need_profile(self, home: Path) -> None:
        """Should ask for onboarding before showing metrics."""
        runner.invoke(app, ["init"])

        result = runner.invoke(app, ["status"])

        assert result.exit_code == 1
        assert "finflex onboard" in result.output

    def test_init_refuses_overwrite(self, home: Path) -> None:
        """Should refuse to overwrite without --force."""
        runner.invoke(app, ["init"])

        result = runner.invoke(app, ["init"])

        assert result.exit_code == 1
        assert "--force" in result.output

    def test_onboard_stores_profile(self, onboarded: Path) -> None:
        """Should save the profile with the risk preset ratio."""
        profile = load_profile(onboarded)

        assert profile is not None
        assert profile.has_onboarded
        assert profile.savings_ratio == 0.25
        assert profile.name == "Asha"

    def test_onboard_rejects_unknown_risk(self, home: Path) -> None:
        """Should reject a risk appetite outside low/medium/high."""
        runner.invoke(app, ["init"])

        result = runner.invoke(app, ["onboard", "--risk", "yolo"])

        assert result.exit_code == 1


class TestEntryCommands:
    """Tests for add, add-fixed, edit and import."""

    def test_add_variable(self, onboarded: Path) -> None:
        """Should store the entry and show its opportunity cost."""
        result = runner.invoke(app, ["add", "1000", "--category", "food & drinks", "--note", "dinner"])

        assert result.exit_code == 0, result.output
        assert "3,105" in result.output
        [txn] = load_transactions(onboarded)
        assert txn.label == "Food & Drinks"
        assert txn.note == "dinner"
        assert not txn.is_fixed

    def test_add_rejects_future_date(self, onboarded: Path) -> None:
        """Should refuse to log spending in the future."""
        future_day = (date.today() + timedelta(days=2)).isoformat()

        result = runner.invoke(app, ["add", "100", "--date", future_day])

        assert result.exit_code == 1
        assert load_transactions(onboarded) == []

    def test_add_iso_date_lands_in_right_month(self, onboarded: Path) -> None:
        """Should log an ISO --date on that calendar day."""
        day = (date.today().replace(day=1) - timedelta(days=1)).replace(day=5)

        result = runner.invoke(app, ["add", "500", "--date", day.isoformat()])

        assert result.exit_code == 0, result.output
        [txn] = load_transactions(onboarded)
        assert local_datetime(txn.timestamp).date() == day

    def test_add_rejects_bad_amount(self, onboarded: Path) -> None:
        """Should refuse zero amounts."""
        result = runner.invoke(app, ["add", "0"])

        assert result.exit_code == 1

    def test_add_rejects_unknown_category(self, onboarded: Path) -> None:
        """Should refuse categories outside the closed set."""
        result = runner.invoke(app, ["add", "100", "--category", "Rent"])

        assert result.exit_code == 1

    def test_add_fixed_bulk(self, onboarded: Path) -> None:
        """Should log every bill with a positive amount."""
        result = runner.invoke(app, ["add-fixed", "room rent=12000", "Electricity=0", "Gym=1500"])

        assert result.exit_code == 0, result.output
        transactions = load_transactions(onboarded)
        assert sorted(t.label for t in transactions) == ["Gym", "Room Rent"]
        assert all(t.is_fixed for t in transactions)

    @pytest.mark.parametrize("bill", ["Room Rent=inf", "Room Rent=nan", "Room Rent=-500"])
    def test_add_fixed_rejects_bad_amount(self, onboarded: Path, bill: str) -> None:
        """Should refuse non-finite or negative bills and store nothing."""
        result = runner.invoke(app, ["add-fixed", "Gym=1500", bill])

        assert result.exit_code == 1
        assert "Room Rent" in result.output
        assert load_transactions(onboarded) == []

    def test_status_after_rejected_bill(self, onboarded: Path) -> None:
        """Should keep the dashboard working after a bad bill is refused."""
        runner.invoke(app, ["add-fixed", "Room Rent=inf"])

        result = runner.invoke(app, ["status"])

        assert result.exit_code == 0, result.output

    def test_edit_keeps_id(self, onboarded: Path) -> None:
        """Should replace the entry in place."""
        runner.invoke(app, ["add", "100", "--category", "Transport"])
        [original] = load_transactions(onboarded)

        result = runner.invoke(app, ["edit", str(original.id), "--amount", "250", "--category", "Health"])

        assert result.exit_code == 0, result.output
        [edited] = load_transactions(onboarded)
        assert edited.id == original.id
        assert edited.amount == 250
        assert edited.label == "Health"
        assert edited.timestamp == original.timestamp

    def test_edit_missing(self, onboarded: Path) -> None:
        """Should fail for an unknown ID."""
        result = runner.invoke(app, ["edit", "999", "--amount", "5"])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_import_csv(self, onboarded: Path, tmp_path: Path) -> None:
        """Should import valid rows and skip the rest."""
        csv_path = tmp_path / "spending.csv"
        csv_path.write_text(
            "Date,Amount,Category,Note\n"
            "2025-01-03,250,Transport,cab\n"
            "04/01/2025,\"₹1,200\",Shopping,\n"
            "2025-01-05,abc,Other,\n"
            "2025-01-06,90,Gadgets,\n",
            encoding="utf-8",
        )

        result = runner.invoke(app, ["import", str(csv_path)])

        assert result.exit_code == 0, result.output
        labels = sorted(t.label for t in load_transactions(onboarded))
        assert labels == ["Shopping", "Transport"]
        assert "Skipped 2" in result.output

    def test_import_database_error_stores_nothing(
        self, onboarded: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Should report that no rows were stored when the insert fails."""
        csv_path = tmp_path / "spending.csv"
        csv_path.write_text("Date,Amount,Category\n2025-01-03,250,Transport\n", encoding="utf-8")

        def locked(*args: object, **kwargs: object) -> None:
            raise sqlite3.OperationalError("database is locked")

        monkeypatch.setattr(transactions, "insert_transactions", locked)

        result = runner.invoke(app, ["import", str(csv_path)])

        assert result.exit_code == 1
        assert "No entries from this file were stored" in result.output
        assert load_transactions(onboarded) == []


class TestDashboardCommands:
    """Tests for the read-only dashboard commands."""

    def test_status(self, onboarded: Path) -> None:
        """Should show the safe spend and goal progress."""
        runner.invoke(app, ["add", "500", "--category", "Transport"])

        result = runner.invoke(app, ["status"])

        assert result.exit_code == 0, result.output
        assert "Safe to spend today" in result.output
        assert "Yearly goal" in result.output

    def test_history_categories_timeline(self, onboarded: Path) -> None:
        """Should render every view without errors."""
        runner.invoke(app, ["add", "500", "--category", "Transport"])
        runner.invoke(app, ["add-fixed", "Room Rent=12000"])

        for command in (["history"], ["categories"], ["categories", "--no-histogram"], ["timeline"], ["list"]):
            result = runner.invoke(app, command)
            assert result.exit_code == 0, result.output

    def test_context(self, onboarded: Path) -> None:
        """Should print the assistant summary."""
        runner.invoke(app, ["add", "500", "--category", "Transport", "--note", "[cab]"])

        result = runner.invoke(app, ["context"])

        assert result.exit_code == 0, result.output
        assert "Name: Asha" in result.output
        assert "for Transport (Variable) - [cab]" in result.output

    def test_purge(self, onboarded: Path) -> None:
        """Should erase everything after confirmation."""
        runner.invoke(app, ["add", "500"])

        result = runner.invoke(app, ["purge"], input="y\n")

        assert result.exit_code == 0, result.output
        assert load_profile(onboarded) is None
        assert load_transactions(onboarded) == []

    def test_bad_config_value(self, onboarded: Path) -> None:
        """Should report a malformed config instead of crashing."""
        save_config({"opportunity_cost": {"years": [10, 20]}}, get_config_path())

        result = runner.invoke(app, ["status"])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output


class TestBackup:
    """Tests for backup."""

    def test_copies_database_and_config(self, onboarded: Path, tmp_path: Path) -> None:
        """Should copy both files."""
        backup_dir = tmp_path / "backups"

        result = runner.invoke(app, ["backup", "--output", str(backup_dir)])

        assert result.exit_code == 0, result.output
        assert len(list(backup_dir.glob("finflex_*.db"))) == 1
        assert len(list(backup_dir.glob("config_*.toml"))) == 1

    def test_missing_config_still_backs_up_database(self, onboarded: Path, tmp_path: Path) -> None:
        """Should back up the database alone and warn about the config."""
        get_config_path().unlink()
        backup_dir = tmp_path / "backups"

        result = runner.invoke(app, ["backup", "--output", str(backup_dir)])

        assert result.exit_code == 0, result.output
        assert "skipped" in result.output
        assert len(list(backup_dir.glob("finflex_*.db"))) == 1
        assert list(backup_dir.glob("config_*.toml")) == []

    def test_missing_database(self, home: Path, tmp_path: Path) -> None:
        """Should refuse when there is no database."""
        result = runner.invoke(app, ["backup", "--output", str(tmp_path / "backups")])

        assert result.exit_code == 1
        assert "finflex init" in result.output
