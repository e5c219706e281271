"""
Shared fixtures for the metadata extraction tests.

Network access is mocked: fetchers get a fake ``requests`` session or are
replaced by ``StubFetcher``. The few socket tests talk to a ``LocalOrigin``
on 127.0.0.1.
"""

import pytest
import requests

import app as app_module
from product_metadata.config import ExtractorConfig
from product_metadata.service import MetadataExtractor

from helpers import StubFetcher


@pytest.fixture
def config():
    return ExtractorConfig(timeout_ms=8000, vendor_overlays_enabled=True, max_redirects=5)


@pytest.fixture
def stub_fetcher():
    return StubFetcher()


@pytest.fixture
def extractor(config, stub_fetcher):
    return MetadataExtractor(config=config, fetcher=stub_fetcher)


@pytest.fixture
def client(monkeypatch, extractor):
    monkeypatch.setattr(app_module, 'extractor', extractor)
    app_module.app.config['TESTING'] = True
    with app_module.app.test_client() as test_client:
        yield test_client


@pytest.fixture
def local_session():
    # ignore any proxy settings from the environment
    session = requests.Session()
    session.trust_env = False
    yield session
    session.close()


PRODUCT_PAGE = """<!DOCTYPE html>
<html>
<head>
  <title>  Fallback Title  </title>
  <meta property="og:title" content="Cozy Wool Scarf"/>
  <meta content="https://cdn.example.com/scarf.jpg" property="og:image">
  <meta property='og:description' content='Hand-knit merino scarf.'>
  <script type="application/ld+json">
    {"@context": "https://schema.org", "@type": "Product", "name": "Cozy Wool Scarf",
     "offers": {"@type": "Offer", "price": "34.50", "priceCurrency": "USD"}}
  </script>
</head>
<body><span class="price">$9.99</span></body>
</html>
"""


AMAZON_PAGE = """<html>
<head>
  <title>Amazon.com: Echo Dot</title>
  <meta property="og:title" content="Generic Echo Title">
  <meta property="og:image" content="https://example.com/og.jpg">
</head>
<body>
  <span id="productTitle">
      Echo Dot (5th Gen) Smart Speaker
  </span>
  <img id="landingImage" src="https://m.media-amazon.com/images/I/echo.jpg" alt="Echo">
  <div id="corePriceDisplay_desktop_feature_div">
    <span class="a-price"><span class="a-offscreen">$49.99</span></span>
  </div>
</body>
</html>
"""


@pytest.fixture
def product_page():
    return PRODUCT_PAGE


@pytest.fixture
def amazon_page():
    return AMAZON_PAGE
