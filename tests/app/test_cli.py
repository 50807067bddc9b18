from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from copysync.domain.model import CopyStatus, CopyType, Scope
from copysync.domain.reconciliation import SyncResult
from copysync.ui import cli as cli_module
from tests.support.copy_items import make_record

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def drafts_file(tmp_path: Path) -> Path:
    path = tmp_path / "drafts.json"
    path.write_text(json.dumps([{"title": "Launch", "content": "live"}]), encoding="utf-8")
    return path


def test_sync_command_passes_flags(monkeypatch: pytest.MonkeyPatch, drafts_file: Path) -> None:
    captured: dict[str, object] = {}

    def fake_sync(scope: Scope, drafts: object, **kwargs: object) -> SyncResult:
        captured.update(kwargs, scope=scope, drafts=drafts)
        return SyncResult(success=True)

    monkeypatch.setattr(cli_module, "run_copy_sync", fake_sync)

    cli_module.main(
        [
            "sync",
            "--site-id",
            "site-1",
            "--user-id",
            "user-1",
            "--drafts",
            str(drafts_file),
            "--authoritative",
            "--no-title-fallback",
        ]
    )

    assert captured["scope"] == Scope(site_id="site-1", user_id="user-1")
    assert captured["scope_is_authoritative"] is True
    assert captured["title_fallback"] is False
    assert captured["dry_run"] is False
    assert captured["on_plan"] is None
    drafts = captured["drafts"]
    assert isinstance(drafts, list)
    assert drafts[0].body == "live"  # type: ignore[union-attr]


def test_sync_command_defaults_leave_title_fallback_to_config(
    monkeypatch: pytest.MonkeyPatch, drafts_file: Path
) -> None:
    captured: dict[str, object] = {}

    def fake_sync(scope: Scope, drafts: object, **kwargs: object) -> SyncResult:
        captured.update(kwargs)
        return SyncResult(success=True)

    monkeypatch.setattr(cli_module, "run_copy_sync", fake_sync)

    cli_module.main(
        ["sync", "--site-id", "s", "--user-id", "u", "--drafts", str(drafts_file), "--dry-run"]
    )

    assert captured["title_fallback"] is None
    assert captured["scope_is_authoritative"] is False
    assert captured["dry_run"] is True
    assert captured["on_plan"] is not None


def test_sync_command_exits_with_failure_code(
    monkeypatch: pytest.MonkeyPatch, drafts_file: Path
) -> None:
    def fake_sync(*_: object, **__: object) -> SyncResult:
        return SyncResult(success=False, error='Duplicate title: "Launch"')

    monkeypatch.setattr(cli_module, "run_copy_sync", fake_sync)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["sync", "--site-id", "s", "--user-id", "u", "--drafts", str(drafts_file)])

    assert excinfo.value.code == 1


def test_blank_scope_is_a_validation_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_list(*_: object, **__: object) -> list[object]:
        raise AssertionError("list_items should not be called")

    monkeypatch.setattr(cli_module, "list_items", fake_list)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["list", "--site-id", " ", "--user-id", "u"])

    assert excinfo.value.code == 2


def test_list_command_prints_one_json_line_per_item(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, object] = {}

    def fake_list(scope: Scope, **kwargs: object) -> list[object]:
        captured.update(kwargs, scope=scope)
        return [make_record("a", "Launch", labels=frozenset({"b", "a"}))]

    monkeypatch.setattr(cli_module, "list_items", fake_list)

    cli_module.main(["list", "--site-id", "s", "--user-id", "u", "--category", "tweet"])

    assert captured["category"] is CopyType.TWEET
    assert captured["status"] is None
    line = json.loads(capsys.readouterr().out.strip())
    assert line["id"] == "a"
    assert line["tags"] == ["a", "b"]


def test_set_status_and_delete_commands(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple[str, object]] = []

    monkeypatch.setattr(
        cli_module, "set_item_status", lambda record_id, status: calls.append((record_id, status))
    )
    monkeypatch.setattr(cli_module, "delete_item", lambda record_id: calls.append((record_id, None)))

    cli_module.main(["set-status", "--id", "a", "--status", "published"])
    cli_module.main(["delete", "--id", "b"])

    assert calls == [("a", CopyStatus.PUBLISHED), ("b", None)]


def test_unexpected_errors_exit_with_code_one(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_delete(record_id: str) -> None:
        raise RuntimeError("boom")

    monkeypatch.setattr(cli_module, "delete_item", fake_delete)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["delete", "--id", "b"])

    assert excinfo.value.code == 1


def test_invalid_drafts_file_is_a_validation_error(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    path = tmp_path / "drafts.json"
    path.write_text('[{"title": "x", "copy_type": "fax"}]', encoding="utf-8")
    monkeypatch.setattr(cli_module, "run_copy_sync", lambda *_, **__: SyncResult(success=True))

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["sync", "--site-id", "s", "--user-id", "u", "--drafts", str(path)])

    assert excinfo.value.code == 2
