import logging
from functools import cached_property
from typing import Any, List

from bs4 import BeautifulSoup

from .structured_data import ProductData, find_products, iter_json_ld

logger = logging.getLogger(__name__)


class Page:
    """One fetched HTML document, parsed lazily and at most once."""

    def __init__(self, html: str, url: str = ''):
        self.html = html or ''
        self.url = url

    @cached_property
    def soup(self) -> BeautifulSoup:
        try:
            return BeautifulSoup(self.html, 'html.parser')
        except Exception as e:
            logger.debug(f"HTML parser gave up on {self.url or 'page'}: {e}")
            return BeautifulSoup('', 'html.parser')

    @cached_property
    def json_ld(self) -> List[Any]:
        return list(iter_json_ld(self.soup))

    @cached_property
    def products(self) -> List[ProductData]:
        return find_products(self.json_ld)
