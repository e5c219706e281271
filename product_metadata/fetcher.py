import logging
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Optional, Tuple

import requests
from bs4 import UnicodeDammit
from urllib3.exceptions import ReadTimeoutError

from .config import ExtractorConfig
from .errors import FetchFailure, FetchTimeout

logger = logging.getLogger(__name__)

# Rotate user agents; many shops degrade or block non-browser clients
USER_AGENTS = [
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.1 Safari/605.1.15',
]

# Small reads so a cancelled download notices quickly
CHUNK_SIZE = 1024
# Bodies past this size are truncated
MAX_BODY_BYTES = 5 * 1024 * 1024


def get_headers():
    return {
        'User-Agent': random.choice(USER_AGENTS),
        'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8',
        'Accept-Language': 'en-US,en;q=0.9',
        'Accept-Encoding': 'gzip, deflate',
        'DNT': '1',
        'Upgrade-Insecure-Requests': '1',
        'Sec-Fetch-Dest': 'document',
        'Sec-Fetch-Mode': 'navigate',
        'Sec-Fetch-Site': 'none',
    }


def decode_body(body: bytes, content_type: str) -> str:
    """Decode with the declared charset when there is one, else sniff it."""
    declared = []
    for part in content_type.split(';')[1:]:
        key, _, value = part.partition('=')
        if key.strip().lower() == 'charset' and value.strip():
            declared.append(value.strip().strip('"\''))
    dammit = UnicodeDammit(body, known_definite_encodings=declared, is_html=True)
    if dammit.unicode_markup is None:
        return body.decode('utf-8', errors='replace')
    return dammit.unicode_markup


class HTMLFetcher:
    """Single-attempt HTML download bounded by a total wall-clock timeout.

    requests only bounds the connect and each socket read, so a server that
    trickles bytes could hold a caller far past ``timeout_ms``. The download
    runs on a worker thread and the caller waits on it for at most the whole
    budget. A worker left behind sees the cancel flag at its next chunk and
    closes the response.
    """

    def __init__(self, timeout_ms: int = 8000, max_redirects: int = 5,
                 session: Optional[requests.Session] = None,
                 max_body_bytes: int = MAX_BODY_BYTES):
        self.timeout_ms = timeout_ms
        self.max_redirects = max_redirects
        self.session = session
        self.max_body_bytes = max_body_bytes

    @classmethod
    def from_config(cls, config: ExtractorConfig) -> 'HTMLFetcher':
        return cls(timeout_ms=config.timeout_ms, max_redirects=config.max_redirects)

    @property
    def timeout(self) -> float:
        return self.timeout_ms / 1000.0

    def fetch(self, url: str) -> str:
        deadline = time.monotonic() + self.timeout
        cancelled = threading.Event()
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='html-fetch')
        logger.info(f"Fetching: {url}")

        try:
            future = executor.submit(self._download, url, deadline, cancelled)
            body, content_type = future.result(timeout=self.timeout)

        except FuturesTimeoutError as e:
            cancelled.set()
            logger.warning(f"Gave up on {url} after {self.timeout_ms}ms")
            raise FetchTimeout(detail=f'No complete response within {self.timeout_ms}ms') from e
        except requests.Timeout as e:
            raise FetchTimeout(detail=str(e)) from e
        except requests.TooManyRedirects as e:
            raise FetchFailure(detail=f'More than {self.max_redirects} redirects') from e
        except requests.ConnectionError as e:
            if (e.args and isinstance(e.args[0], ReadTimeoutError)) or time.monotonic() > deadline:
                raise FetchTimeout(detail=str(e)) from e
            raise FetchFailure(detail=f'Connection error: {str(e)[:100]}') from e
        except requests.RequestException as e:
            raise FetchFailure(detail=f'Request error: {str(e)[:100]}') from e
        finally:
            # never join a worker that is still blocked on the socket
            executor.shutdown(wait=False)

        logger.info(f"Fetched {len(body)} bytes from {url}")
        return decode_body(body, content_type)

    def _download(self, url: str, deadline: float, cancelled: threading.Event) -> Tuple[bytes, str]:
        if self.session is not None:
            return self._get(self.session, url, deadline, cancelled)
        with requests.Session() as session:
            return self._get(session, url, deadline, cancelled)

    def _get(self, session: requests.Session, url: str, deadline: float,
             cancelled: threading.Event) -> Tuple[bytes, str]:
        session.max_redirects = self.max_redirects
        response = session.get(url, headers=get_headers(), timeout=self.timeout,
                               allow_redirects=True, stream=True)
        try:
            status = response.status_code
            if not 200 <= status < 300:
                if status == 403:
                    detail = 'Access denied by website (403). The site is blocking automated requests.'
                elif status == 503:
                    detail = 'Service unavailable (503). The website is temporarily down or blocking requests.'
                else:
                    detail = f'HTTP error {status}'
                raise FetchFailure(f'Failed to fetch URL. Status: {status}', detail=detail,
                                   status_code=status)

            chunks = []
            size = 0
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if cancelled.is_set() or time.monotonic() > deadline:
                    raise FetchTimeout(detail=f'Body not received within {self.timeout_ms}ms')
                chunks.append(chunk)
                size += len(chunk)
                if size >= self.max_body_bytes:
                    logger.warning(f"Truncating {url} at {self.max_body_bytes} bytes")
                    break
            body = b''.join(chunks)[:self.max_body_bytes]
            return body, response.headers.get('Content-Type', '')
        finally:
            response.close()
