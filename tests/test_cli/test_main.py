"""
Tests for the command-line host.
"""

import json
import os
import tempfile

import pytest

import main


def run_cli(ledger_path, *args):
    with pytest.raises(SystemExit) as exc_info:
        main.main(["--ledger-path", ledger_path, "--log-file", "", *args])
    return exc_info.value.code


@pytest.fixture
def ledger_path():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield os.path.join(tmpdir, "ledger.json")


def test_resolve_identity_accepts_hex_and_phrases():
    hex_address = "ab" * 32

    assert str(main.resolve_identity(hex_address)) == hex_address
    assert main.resolve_identity("alice") == main.resolve_identity("alice")
    assert main.resolve_identity("alice") != main.resolve_identity("bob")


def test_add_update_show(ledger_path, capsys):
    assert run_cli(ledger_path, "fund", "--owner", "alice") == 0
    assert run_cli(
        ledger_path, "add", "--owner", "alice", "--title", "Cafe", "--rating", "8",
        "--description", "Great coffee", "--location", "Downtown"
    ) == 0
    assert run_cli(
        ledger_path, "update", "--owner", "alice", "--title", "Cafe", "--rating", "9",
        "--description", "Still great", "--location", "Downtown"
    ) == 0
    capsys.readouterr()

    assert run_cli(ledger_path, "show", "--owner", "alice", "--title", "Cafe") == 0
    review = json.loads(capsys.readouterr().out)

    assert review == {
        "is_initialized": True,
        "title": "Cafe",
        "rating": 9,
        "description": "Still great",
        "location": "Downtown",
    }


def test_derive_prints_address(ledger_path, capsys):
    assert run_cli(ledger_path, "derive", "--owner", "alice", "--title", "Cafe") == 0
    first = capsys.readouterr().out.strip()

    assert run_cli(ledger_path, "derive", "--owner", "alice", "--title", "Cafe") == 0
    assert capsys.readouterr().out.strip() == first
    assert len(first) == 64


def test_invalid_rating_exits_with_error(ledger_path, capsys):
    run_cli(ledger_path, "fund", "--owner", "alice")

    code = run_cli(
        ledger_path, "add", "--owner", "alice", "--title", "Cafe", "--rating", "12"
    )

    assert code == 1
    assert "InvalidRating" in capsys.readouterr().err


def test_update_of_unknown_review_exits_with_error(ledger_path, capsys):
    code = run_cli(
        ledger_path, "update", "--owner", "alice", "--title", "Cafe", "--rating", "5"
    )

    assert code == 1
    assert "IllegalOwner" in capsys.readouterr().err


def test_add_without_funds_exits_with_error(ledger_path, capsys):
    code = run_cli(
        ledger_path, "add", "--owner", "alice", "--title", "Cafe", "--rating", "8"
    )

    assert code == 1
    assert "AllocationFailure" in capsys.readouterr().err
