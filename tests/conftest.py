import os

import pytest


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep DISCOGS_* variables from the host environment out of ClientSettings."""
    for key in list(os.environ):
        if key.startswith("DISCOGS_"):
            monkeypatch.delenv(key, raising=False)
    yield
