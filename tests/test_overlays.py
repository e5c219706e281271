"""
Unit tests for the site-specific overlays.
"""

import pytest

from product_metadata.overlays import AmazonOverlay, SiteOverlay, leading_number, overlay_for
from product_metadata.page import Page


@pytest.fixture
def amazon():
    return AmazonOverlay()


class TestMatching:
    @pytest.mark.parametrize('url', [
        'https://www.amazon.com/dp/B09B8V1LZ3',
        'https://amazon.co.uk/gp/product/123',
        'http://smile.AMAZON.de/dp/X',
    ])
    def test_amazon_hosts(self, url):
        assert isinstance(overlay_for(url), AmazonOverlay)

    @pytest.mark.parametrize('url', [
        'https://example.com/product/123',
        'https://example.com/?ref=amazon.com',
        'https://amazonia-books.com/item',
    ])
    def test_other_hosts(self, url):
        assert overlay_for(url) is None

    def test_custom_overlay_list(self):
        assert overlay_for('https://www.amazon.com/dp/1', overlays=[]) is None


class TestLeadingNumber:
    @pytest.mark.parametrize('text, expected', [
        ('$49.99', 49.99),
        ('$1,299.00', 1299.0),
        ('129.', 129.0),
        ('USD 5', 5.0),
    ])
    def test_parses(self, text, expected):
        assert leading_number(text) == expected

    @pytest.mark.parametrize('text', ['', 'Currently unavailable', '$0.00'])
    def test_rejects(self, text):
        assert leading_number(text) is None


class TestAmazonTitle:
    def test_product_title_element(self, amazon, amazon_page):
        assert amazon.title(Page(amazon_page)) == 'Echo Dot (5th Gen) Smart Speaker'

    def test_falls_back_to_structured_name(self, amazon):
        page = Page('<script type="application/ld+json">{"@type":"Product","name":"Kindle"}</script>')
        assert amazon.title(page) == 'Kindle'

    def test_absent(self, amazon):
        assert amazon.title(Page('<title>Amazon.com</title>')) is None


class TestAmazonImage:
    def test_structured_image_preferred(self, amazon):
        page = Page(
            '<script type="application/ld+json">{"@type":"Product","image":["https://img/ld.jpg"]}</script>'
            '<img id="landingImage" src="https://img/landing.jpg">'
        )
        assert amazon.image(page) == 'https://img/ld.jpg'

    def test_landing_image(self, amazon, amazon_page):
        assert amazon.image(Page(amazon_page)) == 'https://m.media-amazon.com/images/I/echo.jpg'

    def test_absent(self, amazon):
        assert amazon.image(Page('<img id="other" src="x.jpg">')) is None


class TestAmazonPrice:
    def test_core_price_display(self, amazon, amazon_page):
        assert amazon.price(Page(amazon_page)) == 49.99

    def test_priority_order(self, amazon):
        page = Page(
            '<span class="a-price-whole">10.</span>'
            '<span id="priceblock_dealprice">$15.00</span>'
            '<span id="priceblock_ourprice">$20.00</span>'
        )
        assert amazon.price(page) == 20.0

    def test_skips_empty_candidates(self, amazon):
        page = Page(
            '<span id="priceblock_ourprice"></span>'
            '<span id="price_inside_buybox">$33.10</span>'
        )
        assert amazon.price(page) == 33.1

    def test_price_whole(self, amazon):
        assert amazon.price(Page('<span class="a-price-whole">1,099<span>.</span></span>')) == 1099.0

    def test_data_price_key(self, amazon):
        page = Page('<div data-a-state=\'{"price":"$64.00"}\'></div>')
        assert amazon.price(page) == 64.0

    def test_absent(self, amazon):
        assert amazon.price(Page('<div>See options</div>')) is None


def test_base_overlay_contributes_nothing():
    overlay = SiteOverlay()
    page = Page('<span id="productTitle">Thing</span>')
    assert not overlay.matches('https://www.amazon.com/')
    assert overlay.title(page) is None
    assert overlay.image(page) is None
    assert overlay.price(page) is None
