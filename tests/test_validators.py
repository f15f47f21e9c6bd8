import pytest

from exceptions import InvalidURLError, MissingFieldError
from utils.validators import URLValidator


@pytest.mark.parametrize("url", [
    "https://example.com",
    "http://example.com/path?q=1",
    "https://sub.example.co.uk:8443/health",
    "http://localhost:3000/ping",
])
def test_valid_urls(url):
    assert URLValidator.validate(url) == url


def test_strips_whitespace():
    assert URLValidator.validate("  https://example.com  ") == "https://example.com"


@pytest.mark.parametrize("url", [None, "", "   "])
def test_missing(url):
    with pytest.raises(MissingFieldError):
        URLValidator.validate(url)


def test_no_scheme():
    with pytest.raises(InvalidURLError) as exc_info:
        URLValidator.validate("example.com")

    assert exc_info.value.details["reason"] == "no_scheme"


@pytest.mark.parametrize("url", ["https://", "https://no spaces.com", "ftp://example.com"])
def test_invalid(url):
    with pytest.raises(InvalidURLError):
        URLValidator.validate(url)


def test_too_long():
    with pytest.raises(InvalidURLError) as exc_info:
        URLValidator.validate("https://example.com/" + "a" * 3000)

    assert exc_info.value.details["reason"] == "too_long"


def test_non_string():
    with pytest.raises(InvalidURLError):
        URLValidator.validate(42)
