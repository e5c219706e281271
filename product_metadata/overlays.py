"""
Site-specific extractors tried before the generic ones.

An overlay only ever adds information: a None from any of its fields
sends that field on to the generic extractor.
"""

import logging
import re
from typing import List, Optional
from urllib.parse import urlparse

from .page import Page
from .structured_data import parse_price

logger = logging.getLogger(__name__)

_NUMBER = re.compile(r'(\d[\d,]*\.?\d*)')


def leading_number(text: str) -> Optional[float]:
    """First positive number in an element's text, e.g. ``$1,299.99`` -> 1299.99."""
    if not text:
        return None
    match = _NUMBER.search(text)
    if not match:
        return None
    price = parse_price(match.group(1))
    if price is None or price <= 0:
        return None
    return price


class SiteOverlay:
    name = 'generic'

    def matches(self, url: str) -> bool:
        return False

    def title(self, page: Page) -> Optional[str]:
        return None

    def image(self, page: Page) -> Optional[str]:
        return None

    def price(self, page: Page) -> Optional[float]:
        return None


class AmazonOverlay(SiteOverlay):
    name = 'amazon'

    TITLE_SELECTORS = ['#productTitle']
    IMAGE_SELECTORS = ['img#landingImage']
    PRICE_SELECTORS = [
        '#priceblock_ourprice',
        '#priceblock_dealprice',
        '#price_inside_buybox',
        '#corePriceDisplay_desktop_feature_div .a-offscreen',
        '.apexPriceToPay .a-offscreen',
        '.a-price .a-offscreen',
        '.a-price-whole',
    ]
    DATA_PRICE = re.compile(r'"price"\s*:\s*"?\$?(\d+\.?\d*)"', re.IGNORECASE)

    def matches(self, url):
        try:
            host = urlparse(url).netloc.lower()
        except ValueError:
            return False
        return 'amazon.' in host

    def title(self, page):
        for selector in self.TITLE_SELECTORS:
            element = page.soup.select_one(selector)
            if element:
                text = element.get_text(strip=True)
                if text:
                    return text
        for product in page.products:
            if product.name:
                return product.name
        return None

    def image(self, page):
        for product in page.products:
            if product.image:
                return product.image
        for selector in self.IMAGE_SELECTORS:
            element = page.soup.select_one(selector)
            if element:
                src = element.get('src')
                if isinstance(src, str) and src.strip():
                    return src.strip()
        return None

    def price(self, page):
        for selector in self.PRICE_SELECTORS:
            for element in page.soup.select(selector):
                price = leading_number(element.get_text(strip=True))
                if price is not None:
                    logger.debug(f"Amazon price from {selector}: {price}")
                    return price
        match = self.DATA_PRICE.search(page.html)
        if match:
            price = parse_price(match.group(1))
            if price is not None and price > 0:
                return price
        return None


OVERLAYS: List[SiteOverlay] = [AmazonOverlay()]


def overlay_for(url: str, overlays: Optional[List[SiteOverlay]] = None) -> Optional[SiteOverlay]:
    for overlay in OVERLAYS if overlays is None else overlays:
        if overlay.matches(url):
            return overlay
    return None
