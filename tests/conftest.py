from pathlib import Path

import pytest

from services import KeystoreService
from utils import Settings
from wallet import EncryptionService, KeystoreManager, MnemonicManager, Prompter

TEST_MNEMONIC = "test test test test test test test test test test test junk"
PASSWORD = "correct horse battery staple"


class ScriptedPrompter(Prompter):
    """Answers prompt requests from a fixed script, recording every request."""

    def __init__(self, answers=()):
        self.answers = list(answers)
        self.requests = []
        self.messages = []

    def script(self, *answers):
        self.answers.extend(answers)
        return self

    def ask(self, request):
        self.requests.append(request)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {request.message}")
        answer = self.answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer

    def notify(self, message):
        self.messages.append(message)


@pytest.fixture
def prompter():
    return ScriptedPrompter()


@pytest.fixture
def keystore_path(tmp_path) -> Path:
    return tmp_path / "home" / ".devkit.keystore.json"


@pytest.fixture
def keystore(keystore_path):
    return KeystoreManager(keystore_path)


@pytest.fixture
def manager(keystore, prompter):
    return MnemonicManager(keystore, EncryptionService(prompter), prompter)


@pytest.fixture
def settings(tmp_path):
    home = tmp_path / "home"
    return Settings(
        keystore_path=home / ".devkit.keystore.json",
        legacy_keystore_path=home / ".devkit.keystore",
    )


@pytest.fixture
def service(settings, prompter):
    return KeystoreService(settings, prompter)
