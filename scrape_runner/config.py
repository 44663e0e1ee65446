"""
Runtime configuration (env overridable).

Everything here is read once at import. Callers go through ``config.X`` at
call time so tests can monkeypatch individual values.
"""

import os

# ============================================================================
# BROWSER
# ============================================================================

BROWSER_TYPE = os.getenv('BROWSER_TYPE', 'chromium').lower()
BROWSER_VISUAL = os.getenv('BROWSER_VISUAL', 'false').lower() == 'true'
HEADLESS = not BROWSER_VISUAL

# Chromium only; Camoufox brings its own Firefox fingerprint
USER_AGENT = os.getenv(
    'USER_AGENT',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/122 Safari/537.36'
)
VIEWPORT = {'width': 1366, 'height': 768}
LOCALE = 'en-US'

NAV_TIMEOUT_MS = int(os.getenv('NAV_TIMEOUT_MS', '90000'))
CONTENT_WAIT_MS = int(os.getenv('CONTENT_WAIT_MS', '25000'))
SHOT_TIMEOUT_MS = int(os.getenv('SHOT_TIMEOUT_MS', '60000'))

# ============================================================================
# PROXIES
# ============================================================================

PROXY_LIST = os.getenv('PROXY_LIST', '')
SCRAPER_API_KEY = os.getenv('SCRAPER_API_KEY', '')
SCRAPER_API_PROXY = os.getenv('SCRAPER_API_PROXY', 'http://proxy-server.scraperapi.com:8001')

# ============================================================================
# DEBUG FILES / REPORTS
# ============================================================================

SAVE_DEBUG_FILES = os.getenv('SAVE_DEBUG_FILES', 'true').lower() == 'true'
DEBUG_DIR = os.getenv('DEBUG_DIR', '.')
SAVE_AUDIT_REPORTS = os.getenv('SAVE_AUDIT_REPORTS', 'true').lower() == 'true'
REPORT_DIR = os.getenv('REPORT_DIR', '.')

# ============================================================================
# SITE AUDIT
# ============================================================================

AUDIT_BASE_URL = os.getenv('AUDIT_BASE_URL', 'https://example.com')
AUDIT_PAGES = os.getenv('AUDIT_PAGES', '/')
AUDIT_NAV_TIMEOUT_MS = int(os.getenv('AUDIT_NAV_TIMEOUT_MS', '60000'))
AUDIT_SHOT_SIZE = (1600, 900)

# ============================================================================
# SERVER
# ============================================================================

PORT = int(os.getenv('PORT', '3000'))
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()


def split_env_list(raw):
    """Split a comma separated env value, dropping blanks."""
    return [item.strip() for item in (raw or '').split(',') if item.strip()]
