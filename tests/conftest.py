import os
import pytest
from dctnorm.config import get_settings

def pytest_configure():
    os.environ.setdefault("DCTNORM_LOG_LEVEL", "WARNING")

@pytest.fixture(autouse=True)
def _reset_settings_cache(monkeypatch):
    # evita fuga de estado entre tests
    for k in ("DCTNORM_DECODER_ORDER", "DCTNORM_FALLBACK_ON_INCONSISTENT_METADATA", "DCTNORM_INCONSISTENT_METADATA_TRANSFORM"):
        monkeypatch.delenv(k, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

def pytest_collection_modifyitems(items):
    for item in items:
        if "integration" in item.keywords and os.environ.get("CI") == "true":
            item.add_marker(pytest.mark.slow)
