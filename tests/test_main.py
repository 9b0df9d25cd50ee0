import json

import pytest
from nostr_sdk import Keys

import main


@pytest.fixture
def workspace(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        f"""
paths:
  vault_dir: "{tmp_path / 'vault'}"
  data_dir: "{tmp_path / 'data'}"
  log_file: "{tmp_path / 'nostrsync.log'}"
""",
        encoding='utf-8'
    )
    (tmp_path / "vault").mkdir()
    return tmp_path


def run(workspace, *argv):
    with pytest.raises(SystemExit) as exit_info:
        main.main(["--config", str(workspace / "config.yaml"), *argv])
    return exit_info.value.code


def test_configure_persists_settings(workspace):
    npub = Keys.generate().public_key().to_bech32()

    code = run(workspace, "configure", "--identifier", npub,
               "--relays", "wss://a.example, wss://b.example", "--interval", "5")

    assert code == 0
    saved = json.loads((workspace / "data" / "data.json").read_text(encoding='utf-8'))
    assert saved["identifier"] == npub
    assert saved["relays"] == ["wss://a.example", "wss://b.example"]
    assert saved["interval_minutes"] == 5
    assert saved["last_sync_timestamp"] == 0


def test_configure_rejects_invalid_interval(workspace):
    assert run(workspace, "configure", "--interval", "0") == 1
    assert not (workspace / "data" / "data.json").exists()


def test_sync_without_identifier_fails(workspace, capsys):
    assert run(workspace, "--fetcher", "mock", "sync") == 1
    assert "identifier" in capsys.readouterr().out


def test_mock_sync_writes_notes_once(workspace, capsys):
    npub = Keys.generate().public_key().to_bech32()
    run(workspace, "configure", "--identifier", npub)

    assert run(workspace, "--fetcher", "mock", "sync") == 0
    notes = sorted((workspace / "vault" / "DailyNotes" / "Nostr").glob("*.md"))
    assert notes
    assert all(note.read_text(encoding='utf-8').startswith("#Nostr\n\n") for note in notes)
    ledger = json.loads((workspace / "data" / "synced-events.json").read_text(encoding='utf-8'))
    assert len(ledger) == 3

    before = {note.name: note.read_text(encoding='utf-8') for note in notes}
    assert run(workspace, "--fetcher", "mock", "sync") == 0
    after = {note.name: note.read_text(encoding='utf-8') for note in notes}
    assert before == after

    capsys.readouterr()
    assert run(workspace, "status") == 0
    assert "Synced posts: 3" in capsys.readouterr().out
