import pytest

from weakassoc import remove_store, set_default_storage


@pytest.fixture(autouse=True)
def _clean_default_storage():
    """Each test starts with an empty process-wide carrier."""
    set_default_storage(None)
    remove_store()
    yield
    set_default_storage(None)
    remove_store()
