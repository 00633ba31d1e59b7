"""Tests for the maintenance CLI."""

import asyncio
from pathlib import Path

import pytest
from click.testing import CliRunner

from tests.factories import RecordingRowStore, insert_invoice_row, make_record
from truckbill import cli as cli_module
from truckbill.cli import cli


class SharedStore(RecordingRowStore):
    """Survives the close() each command performs, so state carries across invocations."""

    async def close(self) -> None:
        pass


@pytest.fixture
def store(monkeypatch: pytest.MonkeyPatch) -> SharedStore:
    shared = SharedStore()
    monkeypatch.setattr(cli_module.settings, "row_store_backend", "sql")
    monkeypatch.setattr(cli_module, "create_row_store", lambda settings: shared)
    monkeypatch.setattr(cli_module, "setup_logging", lambda: None)
    return shared


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _write_record(path: Path, invoice_no: str) -> Path:
    path.write_text(make_record(invoice_no).to_blob(), encoding="utf-8")
    return path


def test_save_and_next_number(runner: CliRunner, store: SharedStore, tmp_path: Path) -> None:
    record_path = _write_record(tmp_path / "invoice.json", "P-000000")

    first = runner.invoke(cli, ["save", str(record_path)])
    second = runner.invoke(cli, ["save", str(record_path)])
    preview = runner.invoke(cli, ["next-number"])

    assert first.exit_code == 0, first.output
    assert first.output.strip() == "saved: P-000001"
    assert second.output.strip() == "saved: P-000002"
    assert preview.output.strip() == "P-000003"


def test_save_placeholder_is_aborted(runner: CliRunner, store: SharedStore, tmp_path: Path) -> None:
    record_path = _write_record(tmp_path / "invoice.json", "Loading...")

    result = runner.invoke(cli, ["save", str(record_path)])

    assert result.exit_code == 0
    assert result.output.strip() == "aborted"
    assert store.calls == []


def test_save_rejects_invalid_file(runner: CliRunner, store: SharedStore, tmp_path: Path) -> None:
    record_path = tmp_path / "broken.json"
    record_path.write_text("{not json", encoding="utf-8")

    result = runner.invoke(cli, ["save", str(record_path)])

    assert result.exit_code == 1
    assert "Invalid invoice file" in result.output


def test_save_failure_asks_for_retry(runner: CliRunner, store: SharedStore, tmp_path: Path) -> None:
    record_path = _write_record(tmp_path / "invoice.json", "P-000001")
    store.fail_next("create_row", "entries")

    result = runner.invoke(cli, ["save", str(record_path)])

    assert result.exit_code == 1
    assert "Run the same command again to retry" in result.output


def test_history_clear_due_and_delete(runner: CliRunner, store: SharedStore) -> None:
    row = asyncio.run(insert_invoice_row(store, "P-000001"))

    listed = runner.invoke(cli, ["history"])
    assert "P-000001" in listed.output
    assert "DUE" in listed.output
    assert "1 invoices" in listed.output

    cleared = runner.invoke(cli, ["clear-due", row.id])
    assert cleared.output.strip() == "Cleared balance of P-000001"
    assert "PAID" in runner.invoke(cli, ["history"]).output

    deleted = runner.invoke(cli, ["delete", row.id, "--yes"])
    assert deleted.output.strip() == f"Deleted {row.id}"

    missing = runner.invoke(cli, ["delete", row.id, "--yes"])
    assert missing.exit_code == 1
    assert "not found" in missing.output


def test_memory_backend_is_refused(runner: CliRunner, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    created: list[object] = []
    monkeypatch.setattr(cli_module.settings, "row_store_backend", "memory")
    monkeypatch.setattr(cli_module, "create_row_store", lambda settings: created.append(settings))
    monkeypatch.setattr(cli_module, "setup_logging", lambda: None)
    record_path = _write_record(tmp_path / "invoice.json", "P-000000")

    result = runner.invoke(cli, ["save", str(record_path)])

    assert result.exit_code == 1
    assert "does not persist between commands" in result.output
    assert created == []


def test_sql_backend_persists_across_commands(
    runner: CliRunner,
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.setattr(cli_module.settings, "row_store_backend", "sql")
    monkeypatch.setattr(cli_module.settings, "database_url", f"sqlite+aiosqlite:///{tmp_path}/cli.db")
    monkeypatch.setattr(cli_module, "setup_logging", lambda: None)
    record_path = _write_record(tmp_path / "invoice.json", "P-000000")

    first = runner.invoke(cli, ["save", str(record_path)])
    second = runner.invoke(cli, ["save", str(record_path)])
    listed = runner.invoke(cli, ["history"])

    assert first.output.strip() == "saved: P-000001"
    assert second.output.strip() == "saved: P-000002"
    assert "2 invoices" in listed.output
