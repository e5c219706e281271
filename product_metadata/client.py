"""
Caller-side helper for the extraction endpoint.

Any failure collapses to ``ExtractionResult.failed()`` so that adding an
item can fall back to manual entry.
"""

import logging
from typing import Optional

import requests

from .config import Config
from .errors import InvalidInput
from .models import ExtractionResult
from .service import validate_url

logger = logging.getLogger(__name__)

DEFAULT_CLIENT_TIMEOUT = 8.0


class MetadataClient:
    def __init__(self, endpoint_url: Optional[str] = None, timeout: float = DEFAULT_CLIENT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.endpoint_url = endpoint_url or Config.API_URL
        self.timeout = timeout
        self.session = session or requests.Session()

    def extract(self, url: str) -> ExtractionResult:
        try:
            validate_url(url)
        except InvalidInput:
            return ExtractionResult.failed()

        logger.info(f"Fetching metadata from: {self.endpoint_url}")
        try:
            response = self.session.post(self.endpoint_url, json={'url': url}, timeout=self.timeout)
        except requests.Timeout:
            logger.warning("Metadata extraction timeout")
            return ExtractionResult.failed()
        except requests.RequestException as e:
            logger.error(f"Metadata extraction error: {e}")
            return ExtractionResult.failed()

        if not response.ok:
            logger.warning(f"Metadata extraction failed: {response.status_code}")
            return ExtractionResult.failed()

        try:
            data = response.json()
        except ValueError:
            logger.error("Metadata endpoint returned a non-JSON body")
            return ExtractionResult.failed()

        if not isinstance(data, dict) or data.get('success') is not True:
            return ExtractionResult.failed()

        result = ExtractionResult.from_metadata(data.get('metadata'))
        if result.success:
            logger.info(f"Metadata extracted successfully: {result.title}")
        return result
