"""Shared fixtures: a scripted prompter, account keys and an isolated home directory."""
import base64
from datetime import datetime, timezone
from pathlib import Path

import pytest

from azure_blob_sas.sas.domains.prompts import Prompter

ACCOUNT_KEY = base64.b64encode(bytes(range(64))).decode()
OTHER_ACCOUNT_KEY = base64.b64encode(bytes(range(64, 128))).decode()
FIXED_NOW = datetime(2026, 1, 1, 12, 0, 0, 123456, tzinfo=timezone.utc)


class ScriptedPrompter(Prompter):
    """Answers prompts from a script and records what was asked."""

    def __init__(self, secrets=(), validity="Valid for an hour", permission="Read-only", error_action=None):
        self.secrets = list(secrets)
        self.validity = validity
        self.permission = permission
        self.error_action = error_action
        self.input_prompts = []
        self.rejected = []
        self.quick_picks = []
        self.errors = []

    def show_input_box(self, prompt, password=False, validate_input=None):
        self.input_prompts.append((prompt, password))
        while self.secrets:
            answer = self.secrets.pop(0)
            if answer is None:
                return None
            error = validate_input(answer) if validate_input else None
            if error is None:
                return answer
            self.rejected.append((answer, error))
        return None

    def show_quick_pick(self, items, placeholder=None):
        self.quick_picks.append((placeholder, [item.label for item in items]))
        wanted = self.validity if len(self.quick_picks) == 1 else self.permission
        for item in items:
            if item.label == wanted:
                return item
        return None

    def show_error_message(self, message, *actions):
        self.errors.append((message, actions))
        return self.error_action


@pytest.fixture
def account_key():
    return ACCOUNT_KEY


@pytest.fixture
def other_account_key():
    return OTHER_ACCOUNT_KEY


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def temp_home(tmp_path, monkeypatch):
    """Fixture to create a temporary home directory for testing."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()
    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setattr(Path, "home", lambda: fake_home)
    return fake_home


@pytest.fixture
def temp_config_dir(temp_home):
    config_dir = temp_home / ".config" / "azure-blob-sas"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir
