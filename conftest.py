import pytest

from PyQt6.QtCore import QCoreApplication

from passkeep.dialog import DialogController
from passkeep.vault import CredentialStore, MemoryBackend


@pytest.fixture(scope="session", autouse=True)
def qt_core_app():
    """Signals are delivered directly, but keep one core app alive for Qt."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def store(backend):
    return CredentialStore(backend=backend)


@pytest.fixture
def dialogs():
    return DialogController()
