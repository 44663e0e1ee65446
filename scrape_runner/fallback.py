"""
Scrape with fallback

Tries each egress candidate in order (Direct, then proxies as supplied) and
stops at the first one that yields meaningful product data. Every candidate
tried leaves exactly one AttemptRecord behind, success or not.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from playwright.async_api import Page

from . import config
from .block_detector import check_body_text, check_status
from .browser_session import BrowserSession
from .debug_files import save_debug_snapshot
from .errors import ContextError, NavigationError, NoMeaningfulData, ScrapeError
from .page_extractor import CONTENT_MARKERS, ExtractionResult, extract
from .proxies import EgressCandidate

logger = logging.getLogger(__name__)

CONTEXT_FAILED_NOTE = "context-failed"
NO_DATA_NOTE = "No meaningful product data found"
SUCCESS_NOTE = "success"
EXHAUSTED_ERROR = "All attempts failed (direct + proxies)."

_MARKERS_JS = f"() => document.querySelectorAll({CONTENT_MARKERS!r}).length > 0"


@dataclass(frozen=True)
class AttemptRecord:
    proxy: str
    success: bool
    status: Optional[int] = None
    note: str = ""
    debug_files: Optional[Dict[str, str]] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "proxy": self.proxy,
            "success": self.success,
            "status": self.status,
            "note": self.note,
        }
        if self.debug_files:
            data["debugFiles"] = dict(self.debug_files)
        return data


@dataclass
class FallbackOutcome:
    result: Optional[ExtractionResult] = None
    candidate: Optional[EgressCandidate] = None
    attempts: List[AttemptRecord] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.result is not None

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {
                "success": True,
                "proxyUsed": self.candidate.label,
                "attemptInfo": [a.to_dict() for a in self.attempts],
                "result": self.result.to_dict(),
            }
        return {
            "success": False,
            "attemptInfo": [a.to_dict() for a in self.attempts],
            "error": EXHAUSTED_ERROR,
        }


async def _navigate(page: Page, url: str) -> Optional[int]:
    try:
        response = await page.goto(url, wait_until="domcontentloaded", timeout=config.NAV_TIMEOUT_MS)
    except Exception as e:
        raise NavigationError(str(e)) from e
    return response.status if response is not None else None


async def _wait_for_content(page: Page, tag: str) -> None:
    try:
        await page.wait_for_function(_MARKERS_JS, timeout=config.CONTENT_WAIT_MS)
    except Exception:
        logger.warning(f"{tag} ⚠️ Wait-for-content timed out, attempting extraction anyway.")


async def _read_body_text(page: Page) -> str:
    try:
        return await page.text_content("body") or ""
    except Exception as e:
        logger.warning(f"⚠️ Could not read body text: {e}")
        return ""


async def _run_attempt(
    session: BrowserSession,
    candidate: EgressCandidate,
    target_url: str,
    debug_prefix: str,
    tag: str,
) -> Tuple[AttemptRecord, Optional[ExtractionResult]]:
    try:
        context, page = await session.new_attempt_context(candidate)
    except ContextError as e:
        logger.warning(f"{tag} ❌ {candidate.label} [{e.kind}]: {e.reason}")
        return AttemptRecord(candidate.label, False, None, CONTEXT_FAILED_NOTE), None

    status = None
    debug = None
    try:
        logger.info(f"{tag} 🌐 Visiting {target_url} via {candidate.label}")
        status = await _navigate(page, target_url)
        logger.info(f"{tag} ✅ Response status: {status}")
        check_status(status)

        await _wait_for_content(page, tag)
        debug = await save_debug_snapshot(page, debug_prefix, candidate.label)
        check_body_text(await _read_body_text(page))

        result = await extract(page, target_url)
        if not result.is_meaningful():
            raise NoMeaningfulData(NO_DATA_NOTE)
        return AttemptRecord(candidate.label, True, status, SUCCESS_NOTE, debug), result
    except ScrapeError as e:
        logger.warning(f"{tag} ❌ {candidate.label} [{e.kind}]: {e.reason}")
        return AttemptRecord(candidate.label, False, status, e.reason, debug), None
    finally:
        await session.close_context(context)


async def scrape_with_fallback(
    target_url: str,
    candidates: Sequence[EgressCandidate],
    session: Optional[BrowserSession] = None,
    request_id: Optional[str] = None,
    debug_prefix: str = "scrape-debug",
) -> FallbackOutcome:
    """
    Run the candidate chain against ``target_url``.

    The session is launched here and always closed before returning.
    LaunchError is the only exception that escapes.
    """
    session = session or BrowserSession()
    tag = f"[{request_id or 'scrape'}]"
    outcome = FallbackOutcome()

    await session.launch()
    try:
        for candidate in candidates:
            record, result = await _run_attempt(session, candidate, target_url, debug_prefix, tag)
            outcome.attempts.append(record)
            if result is not None:
                outcome.result = result
                outcome.candidate = candidate
                logger.info(f"{tag} ✅ Scraped via {candidate.label} after {len(outcome.attempts)} attempt(s)")
                break
        else:
            logger.error(f"{tag} ❌ {EXHAUSTED_ERROR}")
    finally:
        await session.close()

    return outcome
