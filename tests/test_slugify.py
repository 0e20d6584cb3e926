"""Tests for heading slug helpers."""

from mdbridge.core.utils import slugify, unique_slug


def test_slugify_basic():
    """Test basic slugification."""
    assert slugify("Getting started") == "getting-started"
    assert slugify("API Reference") == "api-reference"


def test_slugify_unicode():
    """Dashes are normalised and accents dropped."""
    assert slugify("Client–Server flow") == "client-server-flow"
    assert slugify("Café diagrams") == "cafe-diagrams"


def test_slugify_punctuation():
    assert slugify("What's new? (v2)") == "whats-new-v2"
    assert slugify("Test - - Example") == "test-example"
    assert slugify(" Leading and trailing ") == "leading-and-trailing"


def test_unique_slug():
    assert unique_slug("Intro", set()) == "intro"
    assert unique_slug("Intro", {"intro", "intro-1"}) == "intro-2"
    assert unique_slug("???", set()) == "heading"
    assert unique_slug("", {"heading"}, fallback="section") == "section"
