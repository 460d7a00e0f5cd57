import os
import sys
from pathlib import Path


# Ensure `src/backend` is on sys.path so imports like `import common...` work,
# even when pytest's rootdir is the repository root.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

import pytest

MANIFEST_FIXTURES = Path(__file__).resolve().parent / "fixtures" / "manifests"


@pytest.fixture(autouse=True)
def _clean_kubecheck_env(monkeypatch):
    # A developer's shell (or .env) must not leak rule/helm settings into tests.
    for name in list(os.environ):
        if name.startswith("KUBECHECK_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def manifest_fixtures() -> Path:
    return MANIFEST_FIXTURES
