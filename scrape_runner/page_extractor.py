"""
Page Extractor

Reads a fixed set of DOM locations off a loaded product page (Magento
storefront markup) into an ExtractionResult. Every read is isolated: a
missing element leaves that field at its default and extraction carries on.

The browser only returns raw strings; all trimming and formatting happens
here so the rules are plain Python.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from playwright.async_api import Page

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "Unknown"

TITLE_SELECTOR = "h1.page-title span.base, h1.product-title, h1.page-title, [data-ui-id='page-title-wrapper']"
ATTRIBUTE_SELECTORS = {
    "material": "#price-of span:nth-of-type(1)",
    "size": "#price-of span:nth-of-type(2)",
    "weight": "#price-of span:nth-of-type(3)",
}
PRICE_SELECTOR = "#price"
SHADES_SELECTOR = "#shades > div"
COLORS_SELECTOR = "#color .actionProduct"
QUALITY_SELECTOR = "#quality .actionProduct"
LENGTH_SELECTOR = "#length .actionProduct"
THICKNESS_SELECTOR = "#thickness .actionProduct"
HAIR_STYLES_SELECTOR = "#wavy .actionProduct"

# Anything that shows the product has hydrated
CONTENT_MARKERS = "h1, #color, #shades, #quality, #length"

_TEXT_JS = "els => els.map(el => el.textContent || '')"
_INNER_TEXT_JS = "els => els.map(el => el.innerText || '')"
_SPANS_JS = (
    "els => els.map(el => Array.from(el.querySelectorAll('span'))"
    ".slice(0, 2).map(s => s.innerText || ''))"
)
_COLORS_JS = """els => els.map(el => {
  const img = el.querySelector('img');
  return {
    name: el.getAttribute('data-name'),
    code: el.getAttribute('color-code'),
    image: img ? img.src : null,
  };
})"""

_NAME_RE = re.compile(r"·\s*(.*?)\s*-")
_WS_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class ColorSwatch:
    name: Optional[str] = None
    code: Optional[str] = None
    image: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"colorName": self.name, "colorCode": self.code, "image": self.image}


@dataclass(frozen=True)
class ExtractionResult:
    product_url: str
    product_name: str = UNKNOWN_NAME
    material: Optional[str] = None
    size: Optional[str] = None
    weight: Optional[str] = None
    regular_price: Optional[str] = None
    sale_price: Optional[str] = None
    coupon_price: Optional[str] = None
    shades: Tuple[str, ...] = ()
    colors: Tuple[ColorSwatch, ...] = ()
    quality_options: Tuple[str, ...] = ()
    length_options: Tuple[str, ...] = ()
    thickness_options: Tuple[str, ...] = ()
    hair_styles: Tuple[str, ...] = ()

    def is_meaningful(self) -> bool:
        # length/thickness/hair styles alone do not count
        return (
            self.product_name != UNKNOWN_NAME
            or bool(self.shades)
            or bool(self.colors)
            or bool(self.quality_options)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "productUrl": self.product_url,
            "productName": self.product_name,
            "material": self.material,
            "size": self.size,
            "weight": self.weight,
            "regularPrice": self.regular_price,
            "salePrice": self.sale_price,
            "couponPrice": self.coupon_price,
            "shades": list(self.shades),
            "colors": [c.to_dict() for c in self.colors],
            "qualityOptions": list(self.quality_options),
            "lengthOptions": list(self.length_options),
            "thicknessOptions": list(self.thickness_options),
            "hairStyles": list(self.hair_styles),
        }


# ============================================================================
# STRING SHAPING
# ============================================================================

def collapse_whitespace(text: Optional[str]) -> str:
    return _WS_RE.sub(" ", text or "").strip()


def parse_product_name(full: Optional[str]) -> str:
    """Middle segment of "Brand · Name - Variant", else the whole heading."""
    if full is None:
        return UNKNOWN_NAME
    match = _NAME_RE.search(full)
    name = match.group(1).strip() if match else full.strip()
    return name or UNKNOWN_NAME


def clean_shade(text: Optional[str]) -> str:
    return collapse_whitespace(text).split("(")[0].strip()


def format_option(spans: Sequence[Optional[str]]) -> str:
    """First two spans as "label (detail)"; no detail, no parentheses."""
    label = (spans[0] or "").strip() if len(spans) > 0 else ""
    detail = (spans[1] or "").strip() if len(spans) > 1 else ""
    if detail:
        return f"{label} ({detail})".strip()
    return label


# ============================================================================
# DOM READS
# ============================================================================

async def _safe_text(page: Page, selector: str) -> Optional[str]:
    try:
        el = await page.query_selector(selector)
        if el is None:
            return None
        text = await el.text_content()
        return text.strip() if text else None
    except Exception as e:
        logger.debug(f"Text read failed for {selector}: {e}")
        return None


async def _safe_eval_all(page: Page, selector: str, script: str) -> List[Any]:
    try:
        values = await page.eval_on_selector_all(selector, script)
        return list(values or [])
    except Exception as e:
        logger.debug(f"List read failed for {selector}: {e}")
        return []


async def _read_prices(page: Page) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    try:
        el = await page.query_selector(PRICE_SELECTOR)
        if el is None:
            return None, None, None
        sale = await el.get_attribute("price")
        regular = await el.get_attribute("oldprice")
        coupon = await el.get_attribute("cprice")
        return regular, sale, coupon
    except Exception as e:
        logger.warning(f"⚠️ Price extraction had an error: {e}")
        return None, None, None


async def _read_options(page: Page, selector: str) -> Tuple[str, ...]:
    rows = await _safe_eval_all(page, selector, _SPANS_JS)
    options = (format_option(spans or []) for spans in rows)
    # blank rows dropped, not kept as positional placeholders
    return tuple(o for o in options if o)


async def extract(page: Page, url: str) -> ExtractionResult:
    """Read the product page into an ExtractionResult. Never raises."""
    heading = await _safe_text(page, TITLE_SELECTOR)
    regular, sale, coupon = await _read_prices(page)

    raw_shades = await _safe_eval_all(page, SHADES_SELECTOR, _TEXT_JS)
    shades = tuple(s for s in map(clean_shade, raw_shades) if s)

    raw_colors = await _safe_eval_all(page, COLORS_SELECTOR, _COLORS_JS)
    colors = tuple(
        ColorSwatch(name=c.get("name"), code=c.get("code"), image=c.get("image"))
        for c in raw_colors
        if isinstance(c, dict)
    )

    raw_styles = await _safe_eval_all(page, HAIR_STYLES_SELECTOR, _INNER_TEXT_JS)
    # same rule as options: a blank style is not data
    hair_styles = tuple(s for s in map(collapse_whitespace, raw_styles) if s)

    return ExtractionResult(
        product_url=url,
        product_name=parse_product_name(heading),
        material=await _safe_text(page, ATTRIBUTE_SELECTORS["material"]),
        size=await _safe_text(page, ATTRIBUTE_SELECTORS["size"]),
        weight=await _safe_text(page, ATTRIBUTE_SELECTORS["weight"]),
        regular_price=regular,
        sale_price=sale,
        coupon_price=coupon,
        shades=shades,
        colors=colors,
        quality_options=await _read_options(page, QUALITY_SELECTOR),
        length_options=await _read_options(page, LENGTH_SELECTOR),
        thickness_options=await _read_options(page, THICKNESS_SELECTOR),
        hair_styles=hair_styles,
    )
