import pytest

from scrape_runner import config


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """No env proxies, no files written outside tmp_path."""
    monkeypatch.setattr(config, "PROXY_LIST", "")
    monkeypatch.setattr(config, "SCRAPER_API_KEY", "")
    monkeypatch.setattr(config, "SAVE_DEBUG_FILES", False)
    monkeypatch.setattr(config, "SAVE_AUDIT_REPORTS", False)
    monkeypatch.setattr(config, "DEBUG_DIR", str(tmp_path / "debug"))
    monkeypatch.setattr(config, "REPORT_DIR", str(tmp_path / "reports"))
