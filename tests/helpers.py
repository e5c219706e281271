"""Test doubles shared across the test modules."""

import socket
import threading
from typing import List, Optional
from unittest.mock import MagicMock


def make_response(status_code=200, body=b'', content_type='text/html; charset=utf-8', chunks=None):
    """A stand-in for a streamed ``requests.Response``."""
    response = MagicMock()
    response.status_code = status_code
    response.headers = {'Content-Type': content_type}
    if chunks is None:
        chunks = [body] if body else []
    response.iter_content.return_value = iter(chunks)
    return response


class StubFetcher:
    """Returns canned HTML (or raises) and records every URL it was asked for."""

    def __init__(self, html: str = '', error: Optional[Exception] = None):
        self.html = html
        self.error = error
        self.calls: List[str] = []

    def fetch(self, url: str) -> str:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.html


class LocalOrigin:
    """A one-connection HTTP server on 127.0.0.1.

    Sends ``head`` straight away, then ``body`` one byte every ``interval``
    seconds until the body is out or the origin is stopped.
    """

    def __init__(self, body: bytes, interval: float = 0.0, content_length: Optional[int] = None):
        self.body = body
        self.interval = interval
        length = len(body) if content_length is None else content_length
        self.head = (
            'HTTP/1.1 200 OK\r\n'
            'Content-Type: text/html; charset=utf-8\r\n'
            f'Content-Length: {length}\r\n'
            'Connection: close\r\n\r\n'
        ).encode('ascii')
        self._stop = threading.Event()
        self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._listener.bind(('127.0.0.1', 0))
        self._listener.listen(1)
        self._listener.settimeout(10)
        self._thread = threading.Thread(target=self._serve, daemon=True)

    @property
    def url(self) -> str:
        return f'http://127.0.0.1:{self._listener.getsockname()[1]}/product'

    def __enter__(self):
        self._thread.start()
        return self

    def __exit__(self, *exc):
        self._stop.set()
        self._listener.close()
        self._thread.join(timeout=5)

    def _serve(self):
        try:
            conn, _ = self._listener.accept()
        except OSError:
            return
        with conn:
            try:
                conn.recv(65536)
                conn.sendall(self.head)
                if not self.interval:
                    conn.sendall(self.body)
                    return
                for i in range(len(self.body)):
                    if self._stop.wait(self.interval):
                        return
                    conn.sendall(self.body[i:i + 1])
            except OSError:
                return
