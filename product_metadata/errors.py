"""Error types raised while extracting metadata.

Each error carries a ``message`` that is safe to show to an API caller.
"""

from typing import Optional


class MetadataError(Exception):
    message = 'Failed to extract metadata from the URL.'

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        if message:
            self.message = message
        self.detail = detail
        super().__init__(detail or self.message)


class InvalidInput(MetadataError):
    """URL missing, not a string, unparseable, or not http/https."""

    message = 'Invalid URL format.'


class FetchFailure(MetadataError):
    """Network error, too many redirects, or a non-2xx origin status."""

    message = 'Failed to extract metadata from the URL.'

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None,
                 status_code: Optional[int] = None):
        super().__init__(message, detail)
        self.status_code = status_code


class FetchTimeout(FetchFailure):
    message = 'Request timeout. The URL took too long to respond.'
