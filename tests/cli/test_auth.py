"""Tests for 'tasklane login', 'register', 'logout', 'whoami' and 'passwd'."""

import json

import pytest

from tasklane.cli.auth import login, logout, passwd, register, whoami
from tasklane.session import load_session


def test_login(offline, owner, make_args, capsys):
    assert login(make_args(email="owner@example.com", password="secret1")) == 0

    assert capsys.readouterr().out.strip() == "Signed in as owner"
    session = load_session()
    assert session.signed_in
    assert session.current_user.email == "owner@example.com"


def test_login_prompts_for_password(offline, owner, make_args, monkeypatch, capsys):
    monkeypatch.setattr("getpass.getpass", lambda prompt="": "secret1")
    assert login(make_args(email="owner@example.com", password=None)) == 0
    assert "Signed in as owner" in capsys.readouterr().out


def test_login_json(offline, owner, make_args, capsys):
    assert login(make_args(json=True, email="owner@example.com", password="secret1")) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["user"]["username"] == "owner"


def test_login_bad_password(offline, owner, make_args, capsys):
    with pytest.raises(SystemExit) as exc_info:
        login(make_args(email="owner@example.com", password="nope"))

    assert exc_info.value.code == 1
    assert capsys.readouterr().err.strip() == "error: Invalid credentials"
    assert not load_session().signed_in


def test_login_bad_password_json(offline, owner, make_args, capsys):
    with pytest.raises(SystemExit):
        login(make_args(json=True, email="owner@example.com", password="nope"))
    assert json.loads(capsys.readouterr().err) == {"error": "Invalid credentials"}


def test_register(offline, make_args, capsys):
    assert register(make_args(username="carol", email="carol@example.com", password="abcdef")) == 0
    assert "Signed in as carol" in capsys.readouterr().out
    assert load_session().current_user.username == "carol"


def test_register_short_password(offline, backend, make_args, capsys):
    with pytest.raises(SystemExit):
        register(make_args(username="carol", email="carol@example.com", password="abc"))
    assert "error:" in capsys.readouterr().err
    assert backend.calls == []


def test_logout(signed_in, make_args, capsys):
    assert logout(make_args()) == 0
    assert capsys.readouterr().out.strip() == "Signed out"
    assert not load_session().signed_in


def test_whoami(signed_in, make_args, capsys):
    assert whoami(make_args()) == 0
    assert capsys.readouterr().out.strip() == "owner <owner@example.com> (member)"


def test_whoami_json(signed_in, make_args, capsys):
    assert whoami(make_args(json=True)) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["username"] == "owner"
    assert data["name"] == "owner"


def test_whoami_signed_out(offline, make_args, capsys):
    with pytest.raises(SystemExit):
        whoami(make_args())
    assert "Not signed in" in capsys.readouterr().err


def test_passwd(signed_in, backend, make_args, monkeypatch, capsys):
    answers = iter(["secret1", "abcdef", "abcdef"])
    monkeypatch.setattr("getpass.getpass", lambda prompt="": next(answers))

    assert passwd(make_args()) == 0

    assert capsys.readouterr().out.strip() == "Password changed"
    (call,) = backend.calls_to("POST", "/api/auth/change-password")
    assert call.json == {"currentPassword": "secret1", "newPassword": "abcdef"}


def test_passwd_mismatch(signed_in, backend, make_args, monkeypatch, capsys):
    answers = iter(["secret1", "abcdef", "abcxyz"])
    monkeypatch.setattr("getpass.getpass", lambda prompt="": next(answers))

    with pytest.raises(SystemExit):
        passwd(make_args())

    assert capsys.readouterr().err.strip() == "error: New passwords do not match."
    assert backend.calls_to("POST", "/api/auth/change-password") == []
