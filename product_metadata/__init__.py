"""Best-effort product metadata extraction from e-commerce pages."""

from .config import Config, ExtractorConfig
from .errors import FetchFailure, FetchTimeout, InvalidInput, MetadataError
from .models import ExtractionResult
from .service import MetadataExtractor, extract, validate_url

__version__ = '1.0.0'

__all__ = [
    'Config',
    'ExtractionResult',
    'ExtractorConfig',
    'FetchFailure',
    'FetchTimeout',
    'InvalidInput',
    'MetadataError',
    'MetadataExtractor',
    'extract',
    'validate_url',
]
