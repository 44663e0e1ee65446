import asyncio

import pytest

from scrape_runner import page_extractor as px
from scrape_runner.page_extractor import (
    ColorSwatch,
    ExtractionResult,
    extract,
    format_option,
    parse_product_name,
)

from fakes import FakeElement, FakePage, empty_page, product_page

URL = "https://canadahair.ca/4t12-613-clip-in-hair-extensions-remy-hair.html"


def test_extract_full_page():
    result = asyncio.run(extract(product_page(), URL))

    assert result.product_url == URL
    assert result.product_name == "4T12/613 Clip In Hair Extensions"
    assert (result.material, result.size, result.weight) == ("Remy Human Hair", "7 pieces", "120g")
    assert result.sale_price == "129.00"
    assert result.regular_price == "159.00"
    assert result.coupon_price == "119.00"
    assert result.shades == ("4T12/613", "Jet Black")
    assert result.colors == (
        ColorSwatch("4T12/613", "c7a16b", "https://cdn.example/4t12.jpg"),
        ColorSwatch("1", "000000", None),
    )
    assert result.quality_options == ("Synthetic (Heat friendly)", "Remy")
    assert result.length_options == ("16 inches (40cm)",)
    assert result.thickness_options == ("Thick",)
    assert result.hair_styles == ("Straight hair", "Body Wave")
    assert result.is_meaningful()


def test_extract_json_shape():
    data = asyncio.run(extract(product_page(), URL)).to_dict()
    assert list(data) == [
        "productUrl", "productName", "material", "size", "weight",
        "regularPrice", "salePrice", "couponPrice", "shades", "colors",
        "qualityOptions", "lengthOptions", "thicknessOptions", "hairStyles",
    ]
    assert data["colors"][0] == {
        "colorName": "4T12/613",
        "colorCode": "c7a16b",
        "image": "https://cdn.example/4t12.jpg",
    }


def test_no_matching_selectors_gives_defaults():
    result = asyncio.run(extract(empty_page(), URL))
    assert result == ExtractionResult(product_url=URL)
    assert result.product_name == "Unknown"
    assert result.shades == result.colors == result.quality_options == ()
    assert not result.is_meaningful()


def test_extraction_is_idempotent():
    page = product_page()
    first = asyncio.run(extract(page, URL))
    second = asyncio.run(extract(page, URL))
    assert first == second


def test_failing_reads_fall_back_to_defaults():
    class BrokenPage(FakePage):
        async def query_selector(self, selector):
            raise RuntimeError("Target page, context or browser has been closed")

        async def eval_on_selector_all(self, selector, script):
            raise RuntimeError("Execution context was destroyed")

    result = asyncio.run(extract(BrokenPage(), URL))
    assert result == ExtractionResult(product_url=URL)


@pytest.mark.parametrize("heading,expected", [
    ("Canada Hair · Clip In Extensions - Remy", "Clip In Extensions"),
    ("  Tape In Extensions  ", "Tape In Extensions"),
    ("   ", "Unknown"),
    (None, "Unknown"),
])
def test_parse_product_name(heading, expected):
    assert parse_product_name(heading) == expected


@pytest.mark.parametrize("spans,expected", [
    (["16 inches", "40cm"], "16 inches (40cm)"),
    (["Remy"], "Remy"),
    (["Remy", "   "], "Remy"),
    (["Remy", None], "Remy"),
    ([], ""),
])
def test_format_option_omits_missing_detail(spans, expected):
    assert format_option(spans) == expected


def test_only_length_options_is_not_meaningful():
    page = FakePage(lists={px.LENGTH_SELECTOR: [["16 inches", "40cm"]],
                           px.HAIR_STYLES_SELECTOR: ["Straight"]})
    result = asyncio.run(extract(page, URL))
    assert result.length_options == ("16 inches (40cm)",)
    assert not result.is_meaningful()


def test_name_alone_is_meaningful():
    page = FakePage(elements={px.TITLE_SELECTOR: FakeElement("Weft Extensions")})
    assert asyncio.run(extract(page, URL)).is_meaningful()


def test_blank_option_rows_and_styles_are_dropped():
    page = FakePage(lists={
        px.QUALITY_SELECTOR: [["Remy"], [], ["  ", None], ["Virgin", "Raw"]],
        px.HAIR_STYLES_SELECTOR: ["", " \n ", "Kinky  Curly"],
    })
    result = asyncio.run(extract(page, URL))
    assert result.quality_options == ("Remy", "Virgin (Raw)")
    assert result.hair_styles == ("Kinky Curly",)
