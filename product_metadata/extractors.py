"""
Generic field extractors.

Each extractor maps a parsed page to one optional value and never raises
on odd markup: anything it cannot read confidently comes back as None.
"""

import logging
import re
from typing import Optional

from .page import Page
from .structured_data import parse_price

logger = logging.getLogger(__name__)

# Common price renderings, most specific first
PRICE_PATTERNS = [
    re.compile(r'"price"\s*:\s*"?(\d+\.?\d*)"?', re.IGNORECASE),
    re.compile(r'\$(\d+\.?\d+)'),
    re.compile(r'price[^>]*>.*?\$?(\d+\.?\d+)', re.IGNORECASE),
]


def extract_og_tag(page: Page, prop: str) -> Optional[str]:
    """Content of the ``<meta property=prop>`` tag, whatever the attribute order."""
    wanted = prop.lower()
    for meta in page.soup.find_all('meta'):
        name = meta.get('property')
        if not isinstance(name, str) or name.strip().lower() != wanted:
            continue
        content = meta.get('content')
        if isinstance(content, str) and content.strip():
            return content.strip()
    return None


def extract_tag_text(page: Page, tag: str) -> Optional[str]:
    element = page.soup.find(tag)
    if element is None:
        return None
    text = element.get_text().strip()
    return text or None


def extract_title(page: Page) -> Optional[str]:
    return extract_og_tag(page, 'og:title') or extract_tag_text(page, 'title')


def extract_image(page: Page) -> Optional[str]:
    return extract_og_tag(page, 'og:image')


def extract_description(page: Page) -> Optional[str]:
    return extract_og_tag(page, 'og:description')


def extract_structured_price(page: Page) -> Optional[float]:
    for product in page.products:
        if product.offer_price is not None:
            return product.offer_price
    return None


def extract_pattern_price(html: str) -> Optional[float]:
    """First positive price found by the ordered text patterns.

    Only the first hit of each pattern is considered; zero is a
    placeholder, not a price.
    """
    for pattern in PRICE_PATTERNS:
        match = pattern.search(html)
        if not match:
            continue
        price = parse_price(match.group(1))
        if price is not None and price > 0:
            return price
    return None


def extract_price(page: Page) -> Optional[float]:
    price = extract_structured_price(page)
    if price is not None:
        return price
    return extract_pattern_price(page.html)
