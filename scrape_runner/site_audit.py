"""
Site audit

Visits a list of paths under one base URL and flags pages that fail to load,
return an HTTP error, or render a "not found" page with a 200 status.
Failed pages carry a downscaled base64 screenshot.
"""

import base64
import io
import json
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from PIL import Image
from playwright.async_api import Page

from . import config
from .block_detector import is_soft_404
from .browser_session import BrowserSession
from .errors import ContextError
from .proxies import DIRECT

logger = logging.getLogger(__name__)

SOFT_404_ERROR = "Soft 404 detected in page content"


def default_pages() -> List[str]:
    return config.split_env_list(config.AUDIT_PAGES) or ["/"]


def join_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}{path}"


def encode_screenshot(png: bytes) -> Optional[str]:
    """Shrink a PNG to fit AUDIT_SHOT_SIZE and return it base64 encoded."""
    try:
        img = Image.open(io.BytesIO(png)).convert("RGB")
        img.thumbnail(config.AUDIT_SHOT_SIZE)
        buf = io.BytesIO()
        img.save(buf, format="PNG", optimize=True)
        return base64.b64encode(buf.getvalue()).decode()
    except Exception as e:
        logger.warning(f"⚠️ Image normalization failed: {e}")
        return None


async def _capture(page: Page) -> Optional[str]:
    try:
        png = await page.screenshot(full_page=True, timeout=config.SHOT_TIMEOUT_MS)
    except Exception as e:
        logger.warning(f"⚠️ Screenshot failed: {e}")
        return None
    return encode_screenshot(png)


async def audit_page(session: BrowserSession, full_url: str) -> Dict[str, Any]:
    entry = {"page": full_url, "success": True, "status": None, "error": None,
             "loadTime": 0, "jsErrors": [], "screenshot": None}
    start = time.monotonic()

    try:
        context, page = await session.new_attempt_context(DIRECT)
    except ContextError as e:
        entry.update(success=False, error=e.reason)
        return entry

    js_errors = entry["jsErrors"]
    page.on("console", lambda msg: js_errors.append(msg.text) if msg.type == "error" else None)

    try:
        logger.info(f"🔎 Auditing {full_url}")
        try:
            response = await page.goto(full_url, wait_until="domcontentloaded",
                                       timeout=config.AUDIT_NAV_TIMEOUT_MS)
        except Exception as e:
            entry.update(success=False, error=str(e))
        else:
            entry["status"] = response.status if response is not None else None
            if entry["status"] is not None and entry["status"] >= 400:
                entry.update(success=False, error=f"HTTP {entry['status']}")
            else:
                title = await page.title() or ""
                body = await page.text_content("body") or ""
                if is_soft_404(title, body):
                    entry.update(success=False, error=SOFT_404_ERROR)
        entry["loadTime"] = int((time.monotonic() - start) * 1000)

        if entry["success"]:
            logger.info(f"✅ {full_url} OK in {entry['loadTime']}ms (status {entry['status']})")
        else:
            logger.warning(f"⚠️ {full_url} flagged as failure: {entry['error']}")
            entry["screenshot"] = await _capture(page)
    except Exception as e:
        entry.update(success=False, error=str(e),
                     loadTime=int((time.monotonic() - start) * 1000))
    finally:
        await session.close_context(context)

    return entry


def write_report(report: Dict[str, Any]) -> Optional[str]:
    if not config.SAVE_AUDIT_REPORTS:
        return None
    path = Path(config.REPORT_DIR) / f"report-{int(time.time() * 1000)}.json"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(report, indent=2), encoding="utf-8")
    except Exception as e:
        logger.warning(f"⚠️ Could not save report: {e}")
        return None
    return str(path)


async def run_site_audit(
    base_url: Optional[str] = None,
    pages: Optional[Sequence[str]] = None,
    session: Optional[BrowserSession] = None,
) -> Dict[str, Any]:
    """Audit ``pages`` under ``base_url``. LaunchError propagates."""
    base_url = base_url or config.AUDIT_BASE_URL
    pages = list(pages) if pages else default_pages()
    session = session or BrowserSession()

    results = []
    await session.launch()
    try:
        for path in pages:
            results.append(await audit_page(session, join_url(base_url, path)))
    finally:
        await session.close()

    report = {
        "success": True,
        "baseUrl": base_url,
        "timestamp": datetime.now().isoformat(),
        "pagesTested": len(pages),
        "failures": sum(1 for r in results if not r["success"]),
        "results": results,
    }
    report_file = write_report(report)
    if report_file:
        report["reportFile"] = report_file
    return report
