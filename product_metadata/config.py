"""
Configuration Management
========================

Settings for the metadata extraction service. Values come from the
environment, optionally seeded from a ``.env`` file next to the project.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load environment variables from .env file
project_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
env_path = os.path.join(project_dir, '.env')
load_dotenv(env_path)

DEFAULT_TIMEOUT_MS = 8000
DEFAULT_MAX_REDIRECTS = 5


def _env_int(name: str, default: int, minimum: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default
    return max(value, minimum)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class ExtractorConfig:
    """Recognised options for one extraction."""

    timeout_ms: int = DEFAULT_TIMEOUT_MS
    vendor_overlays_enabled: bool = True
    max_redirects: int = DEFAULT_MAX_REDIRECTS

    @property
    def timeout(self) -> float:
        """Timeout in seconds, the unit requests expects."""
        return self.timeout_ms / 1000.0

    @classmethod
    def from_env(cls) -> 'ExtractorConfig':
        return cls(
            timeout_ms=_env_int('METADATA_TIMEOUT_MS', DEFAULT_TIMEOUT_MS, 1),
            vendor_overlays_enabled=_env_bool('METADATA_VENDOR_OVERLAYS', True),
            max_redirects=_env_int('METADATA_MAX_REDIRECTS', DEFAULT_MAX_REDIRECTS, 0),
        )


class Config:
    """Application configuration"""

    # Server Configuration
    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = _env_int('PORT', 3001, 1)
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'

    # API Configuration
    API_PREFIX = "/api"
    API_URL = os.getenv('METADATA_API_URL', f"http://localhost:{PORT}{API_PREFIX}/extract-metadata")

    @classmethod
    def to_dict(cls) -> Dict[str, Any]:
        """Export configuration as dictionary"""
        extractor = ExtractorConfig.from_env()
        return {
            'host': cls.HOST,
            'port': cls.PORT,
            'debug': cls.DEBUG,
            'api_url': cls.API_URL,
            'timeout_ms': extractor.timeout_ms,
            'vendor_overlays_enabled': extractor.vendor_overlays_enabled,
            'max_redirects': extractor.max_redirects,
        }

