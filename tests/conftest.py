import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    # Ensure `import chna_cra...` works without installing the package.
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))


@pytest.fixture(scope="session")
def catalog():
    from chna_cra.features.reference.catalog import load_reference_catalog

    return load_reference_catalog()


@pytest.fixture
def two_span_text() -> str:
    return "Total: I had transportation problems 2.7%. Age 65-74: I had transportation problems 8.5%."
