"""Shared fixtures for CLI tests."""

from argparse import Namespace

import pytest

from tasklane.api import Gateway
from tasklane.api.memory import MemoryTransport
from tasklane.session import Session, save_session


@pytest.fixture
def offline(backend, monkeypatch):
    """Point every CLI gateway at the in-memory backend."""
    monkeypatch.setattr(
        "tasklane.cli._common.connect",
        lambda base_url=None, token=None: Gateway(MemoryTransport(backend, token)),
    )


@pytest.fixture
def signed_in(offline, gateway):
    """A saved session for the owner, as 'tasklane login' would leave it."""
    session = Session(token=gateway.token, user=gateway.auth.me().to_dict())
    save_session(session)
    return session


@pytest.fixture
def make_args():
    def make(json=False, **kwargs):
        return Namespace(api_url=None, json=json, **kwargs)

    return make
