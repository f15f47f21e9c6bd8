"""
============================================================================
URL KEEP-ALIVE - VALIDATORS UTILITY
============================================================================
Validation of the URLs submitted to the command surface.
============================================================================
"""

import re
from typing import Any
from urllib.parse import urlparse

import validators as external_validators

from config.constants import Limits
from exceptions import InvalidURLError, MissingFieldError
from utils.logger import get_logger


logger = get_logger(__name__)


# ============================================================================
# URL VALIDATORS
# ============================================================================

class URLValidator:
    """
    URL validation and parsing.
    """

    URL_PATTERN = re.compile(
        r'^https?://'  # http:// or https://
        r'(?:(?:[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?\.)+[A-Z]{2,63}\.?|'  # domain
        r'localhost|'  # localhost
        r'\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})'  # or IP
        r'(?::\d+)?'  # optional port
        r'(?:/?|[/?]\S+)$', re.IGNORECASE
    )

    @staticmethod
    def is_valid_url(url: str) -> bool:
        """
        Check if URL is a pingable http(s) URL.

        Args:
            url: URL to validate

        Returns:
            True if valid, False otherwise
        """
        if not URLValidator.URL_PATTERN.match(url):
            return False

        # the external validator rejects bare hostnames such as localhost
        if urlparse(url).hostname == "localhost":
            return True

        return external_validators.url(url) is True

    @staticmethod
    def validate(url: Any) -> str:
