"""Tests for the pocketpm CLI."""

import json

import pytest
from unittest.mock import patch

from pocketpm import config as cfg_mod
from pocketpm.cli import build_parser, main
from pocketpm.repository import ConversationRepository
from pocketpm.storage.backends.memory import MemoryStore
from pocketpm.storage.models import Message


@pytest.fixture(autouse=True)
def cli_config():
    orig = cfg_mod._config
    cfg_mod._config = {
        "storage": {"backend": "memory", "key_prefix": "conversations"},
        "history": {"default_user": "default"},
    }
    yield cfg_mod._config
    cfg_mod._config = orig


@pytest.fixture
def repo():
    r = ConversationRepository(MemoryStore())
    r.save_conversation([
        Message(text="I want to build an app for booking dog walkers", is_user=True),
        Message(
            text="This addresses a real need in the pet care market. This is a Platform for pet owners.",
            is_user=False,
        ),
    ], "default")
    with patch("pocketpm.cli._repository", return_value=r):
        yield r


def test_aliases_resolve_to_same_command():
    parser = build_parser()
    assert parser.parse_args(["ls"]).func is parser.parse_args(["list"]).func
    assert parser.parse_args(["rm", "abc"]).func is parser.parse_args(["delete", "abc"]).func


def test_list(repo, capsys):
    main(["list"])
    out = capsys.readouterr().out
    assert "Want Booking Dog Platform" in out
    assert "[Market Research]" in out


def test_list_category_filter(repo, capsys):
    main(["list", "--category", "Growth"])
    assert "(no conversations)" in capsys.readouterr().out


def test_search(repo, capsys):
    main(["find", "pet", "care"])
    assert "1 match(es) for 'pet care'" in capsys.readouterr().out


def test_show_missing_exits(repo):
    with pytest.raises(SystemExit):
        main(["show", "nope"])


def test_show(repo, capsys):
    conv_id = repo.get_conversations()[0].id
    main(["show", conv_id])
    out = capsys.readouterr().out
    assert "you> I want to build" in out


def test_delete(repo, capsys):
    conv_id = repo.get_conversations()[0].id
    main(["rm", conv_id])
    assert repo.get_conversations() == []


def test_delete_missing_reports_not_found(repo, capsys):
    with pytest.raises(SystemExit):
        main(["rm", "nope"])
    out = capsys.readouterr().out
    assert "No conversation nope" in out
    assert "Deleted" not in out
    assert len(repo.get_conversations()) == 1


def test_user_defaults_to_configured_user(repo, cli_config, capsys):
    cli_config["history"]["default_user"] = "alice"
    main(["list"])
    assert "(no conversations)" in capsys.readouterr().out
    main(["list", "--user", "default"])
    assert "Want Booking Dog Platform" in capsys.readouterr().out


def test_regenerate(repo, capsys):
    main(["regen"])
    assert "Regenerated 1 conversation(s)" in capsys.readouterr().out


def test_clear_with_yes(repo):
    main(["clear", "--yes"])
    assert repo.get_conversations() == []


def test_clear_aborts_without_confirmation(repo, monkeypatch):
    monkeypatch.setattr("builtins.input", lambda _prompt: "n")
    main(["clear"])
    assert len(repo.get_conversations()) == 1


def test_export(repo, tmp_path):
    out = tmp_path / "export.json"
    main(["export", "-o", str(out)])
    data = json.loads(out.read_text())
    assert data[0]["messages"][0]["role"] == "user"


def test_stats(repo, capsys):
    main(["stats"])
    out = capsys.readouterr().out
    assert "Market Research" in out


def test_no_command_prints_help(capsys):
    main([])
    assert "usage: pocketpm" in capsys.readouterr().out
