import importlib.util
import os
from pathlib import Path
from unittest.mock import MagicMock

import pytest

ROOT = Path(__file__).resolve().parents[2]


@pytest.fixture()
def gunicorn_conf():
    spec = importlib.util.spec_from_file_location("gunicorn_conf", ROOT / "gunicorn.conf.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_post_fork_lists_secrets_once(monkeypatch, gunicorn_conf):
    calls = []

    def fake_listdir(path):
        calls.append(path)
        return ["client_secret", "idp_admin_password"]

    monkeypatch.setattr(os.path, "isdir", lambda path: True)
    monkeypatch.setattr(os, "listdir", fake_listdir)
    worker = MagicMock()

    gunicorn_conf.post_fork(MagicMock(), worker)

    assert calls == ["/run/secrets"]
    worker.log.info.assert_called_once_with("Found 2 secrets in /run/secrets")


def test_post_fork_without_secrets_mount(monkeypatch, gunicorn_conf):
    monkeypatch.setattr(os.path, "isdir", lambda path: False)
    worker = MagicMock()

    gunicorn_conf.post_fork(MagicMock(), worker)

    worker.log.info.assert_called_once_with("No /run/secrets mount, using environment configuration")
