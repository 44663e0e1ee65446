"""Per-attempt debug snapshots (HTML + full page PNG).

Writes are best-effort: a failure is logged and the attempt carries on.
"""

import logging
import re
import time
from pathlib import Path
from typing import Dict, Optional

from playwright.async_api import Page

from . import config

logger = logging.getLogger(__name__)

LABEL_MAX_CHARS = 60

_UNSAFE_RE = re.compile(r"[:/@]")


def sanitize_label(label: str) -> str:
    return _UNSAFE_RE.sub("_", label or "")[:LABEL_MAX_CHARS]


def snapshot_stem(prefix: str, label: str, ts: Optional[int] = None) -> str:
    ts = ts if ts is not None else int(time.time() * 1000)
    return f"{prefix}-{sanitize_label(label)}-{ts}"


async def save_debug_snapshot(page: Page, prefix: str, label: str) -> Optional[Dict[str, str]]:
    """Save page HTML and a screenshot. Returns the paths that were written."""
    if not config.SAVE_DEBUG_FILES:
        return None

    out_dir = Path(config.DEBUG_DIR)
    stem = snapshot_stem(prefix, label)
    html_file = out_dir / f"{stem}.html"
    png_file = out_dir / f"{stem}.png"
    saved = {}

    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        html_file.write_text(await page.content(), encoding="utf-8")
        saved["html"] = str(html_file)
        await page.screenshot(path=str(png_file), full_page=True, timeout=config.SHOT_TIMEOUT_MS)
        saved["screenshot"] = str(png_file)
        logger.info(f"🧾 Debug files saved: {html_file} {png_file}")
    except Exception as e:
        logger.warning(f"⚠️ Could not save debug files for {label}: {e}")

    return saved or None
