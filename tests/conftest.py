import pytest

from langman.i18n import get_registry


@pytest.fixture(autouse=True)
def clean_global_registry():
    """Keep the process-wide registry empty between tests."""
    get_registry().clear()
    yield
    get_registry().clear()
