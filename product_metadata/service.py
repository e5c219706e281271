"""
Extraction orchestrator: validate, fetch, run overlays and generic
extractors per field, and assemble one ExtractionResult.
"""

import logging
from typing import Callable, List, Optional, TypeVar
from urllib.parse import urlparse

import requests

from .config import ExtractorConfig
from .errors import FetchFailure, FetchTimeout, InvalidInput, MetadataError
from .extractors import extract_description, extract_image, extract_price, extract_title
from .fetcher import HTMLFetcher
from .models import ExtractionResult
from .overlays import SiteOverlay, overlay_for
from .page import Page

logger = logging.getLogger(__name__)

T = TypeVar('T')

ALLOWED_SCHEMES = ('http', 'https')
HOST_FORBIDDEN = '<>"{}|\\^`'


def validate_url(url) -> str:
    if not isinstance(url, str) or not url:
        raise InvalidInput('Invalid request. URL is required.')
    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise InvalidInput(detail=f'Unparseable URL {url!r}: {e}') from e
    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidInput('Invalid URL. Only HTTP and HTTPS protocols are supported.',
                           detail=f'Unsupported scheme {parsed.scheme!r}')
    try:
        hostname = parsed.hostname
        parsed.port  # raises ValueError for a non-numeric or out-of-range port
    except ValueError as e:
        raise InvalidInput(detail=f'Unparseable URL {url!r}: {e}') from e
    if not hostname:
        raise InvalidInput(detail=f'URL has no host: {url!r}')
    if any(ch.isspace() or ord(ch) < 0x20 or ch in HOST_FORBIDDEN for ch in parsed.netloc):
        raise InvalidInput(detail=f'Illegal character in host: {url!r}')
    # same checks the fetcher's requests stack applies before connecting
    try:
        requests.PreparedRequest().prepare_url(url, None)
    except (requests.RequestException, ValueError) as e:
        raise InvalidInput(detail=f'Unparseable URL {url!r}: {e}') from e
    return url


def _attempt(field: str, strategy: Callable[[Page], Optional[T]], page: Page) -> Optional[T]:
    try:
        return strategy(page)
    except Exception as e:
        logger.debug(f"{field} extraction failed for {page.url}: {e}")
        return None


class MetadataExtractor:
    """Turns a product URL into an ExtractionResult."""

    def __init__(self, config: Optional[ExtractorConfig] = None,
                 fetcher: Optional[HTMLFetcher] = None,
                 overlays: Optional[List[SiteOverlay]] = None):
        self.config = config or ExtractorConfig.from_env()
        self.fetcher = fetcher or HTMLFetcher.from_config(self.config)
        self.overlays = overlays

    def extract_fields(self, url: str, html: str) -> ExtractionResult:
        page = Page(html, url)
        title = image_url = price = None

        overlay = overlay_for(url, self.overlays) if self.config.vendor_overlays_enabled else None
        if overlay is not None:
            logger.info(f"Using {overlay.name} overlay for {url}")
            title = _attempt('title', overlay.title, page)
            image_url = _attempt('image', overlay.image, page)
            price = _attempt('price', overlay.price, page)

        if title is None:
            title = _attempt('title', extract_title, page)
        if image_url is None:
            image_url = _attempt('image', extract_image, page)
        if price is None:
            price = _attempt('price', extract_price, page)
        description = _attempt('description', extract_description, page)

        return ExtractionResult(
            title=title,
            image_url=image_url,
            price=price,
            description=description,
            success=True,
        )

    def fetch_and_extract(self, url: str) -> ExtractionResult:
        """Like extract(), but raises InvalidInput, FetchTimeout or FetchFailure."""
        validate_url(url)
        html = self.fetcher.fetch(url)
        result = self.extract_fields(url, html)
        found = [key for key, value in result.metadata().items() if value is not None]
        logger.info(f"Extracted {found or 'no fields'} from {url}")
        return result

    def extract(self, url: str) -> ExtractionResult:
        try:
            return self.fetch_and_extract(url)
        except InvalidInput as e:
            logger.warning(f"Rejected URL {url!r}: {e}")
        except FetchTimeout as e:
            logger.warning(f"Timeout error for {url}: {e}")
        except FetchFailure as e:
            logger.error(f"Fetch error for {url}: {e}")
        except MetadataError as e:
            logger.error(f"Extraction error for {url}: {e}")
        except Exception:
            logger.exception(f"Unexpected error extracting metadata from {url}")
        return ExtractionResult.failed()


def extract(url: str) -> ExtractionResult:
    """Extract with settings read from the environment."""
    return MetadataExtractor().extract(url)
