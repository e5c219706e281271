"""
Linked-data (JSON-LD) decoding for schema.org Product markup.

Decoded JSON is untrusted: every node is checked for its ``@type`` before
nested fields are read, and every nested access tolerates absence or the
wrong shape.
"""

import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

LD_JSON_TYPE = 'application/ld+json'

_LEADING_NUMBER = re.compile(r'^\s*[+-]?(\d[\d,]*(?:\.\d*)?|\.\d+)')


def parse_price(value: Any) -> Optional[float]:
    """Read a leading decimal from a number or string, like ``parseFloat``.

    Thousands separators are dropped. Booleans, non-finite and negative
    values give None.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if not match:
            return None
        try:
            number = float(match.group(0).replace(',', ''))
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


def iter_json_ld(soup: BeautifulSoup) -> Iterator[Any]:
    """Decoded contents of every linked-data script block, in document order."""
    for script in soup.find_all('script'):
        script_type = (script.get('type') or '').strip().lower()
        if script_type != LD_JSON_TYPE:
            continue
        raw = script.string if script.string is not None else script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            yield json.loads(raw)
        except (ValueError, RecursionError):
            logger.debug("Skipping invalid JSON-LD script.")
            continue


def _is_type(node: Any, type_name: str) -> bool:
    if not isinstance(node, dict):
        return False
    declared = node.get('@type')
    if isinstance(declared, str):
        return declared == type_name
    if isinstance(declared, list):
        return type_name in declared
    return False


def _walk(data: Any) -> Iterator[dict]:
    """Top-level nodes of a JSON-LD document: the object, array items or @graph."""
    if isinstance(data, list):
        for item in data:
            yield from _walk(item)
    elif isinstance(data, dict):
        yield data
        graph = data.get('@graph')
        if isinstance(graph, list):
            for item in graph:
                if isinstance(item, dict):
                    yield item


@dataclass(frozen=True)
class ProductData:
    name: Optional[str] = None
    image: Optional[str] = None
    offer_price: Optional[float] = None


def _decode_image(image: Any) -> Optional[str]:
    if isinstance(image, list):
        image = image[0] if image else None
    if isinstance(image, str):
        return image or None
    if isinstance(image, dict):
        url = image.get('url')
        if isinstance(url, str) and url:
            return url
    return None


def _decode_offer_price(offers: Any) -> Optional[float]:
    if isinstance(offers, list):
        offers = offers[0] if offers else None
    if not isinstance(offers, dict):
        return None
    return parse_price(offers.get('price'))


def decode_product(node: Any) -> Optional[ProductData]:
    """Decode one node as a schema.org Product, or None if it is not one."""
    if not _is_type(node, 'Product'):
        return None
    name = node.get('name')
    return ProductData(
        name=(name.strip() or None) if isinstance(name, str) else None,
        image=_decode_image(node.get('image')),
        offer_price=_decode_offer_price(node.get('offers')),
    )


def find_products(blocks: List[Any]) -> List[ProductData]:
    products = []
    for block in blocks:
        for node in _walk(block):
            product = decode_product(node)
            if product is not None:
                products.append(product)
    return products
