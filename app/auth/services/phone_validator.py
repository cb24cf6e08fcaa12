"""
Phone number validation via the BigDataCloud API.
"""

import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


class PhoneValidator:
    """
    Validates and normalizes phone numbers against an external HTTP API.
    """

    DEFAULT_URL = "https://api-bdc.net/data/phone-number-validate"

    def __init__(
        self,
        api_key: Optional[str],
        url: str = DEFAULT_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize PhoneValidator.

        Args:
            api_key: BigDataCloud API key
            url: Validation endpoint
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self._api_key = api_key
        self._url = url
        self._timeout = timeout
        self._transport = transport

    async def validate(self, number: str, country_code: str) -> Optional[Dict[str, Any]]:
        """
        Validate a phone number for a country.

        Args:
            number: Phone number as entered by the user
            country_code: ISO 3166-1 alpha-2 country code

        Returns:
            The API response (``isValid``, ``e164Format``, ...) or None if the
            service could not be reached or answered with an error
        """
        params = {
            "number": number,
            "countryCode": country_code,
            "localityLanguage": "en",
            "key": self._api_key or "",
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(self._url, params=params)
                response.raise_for_status()
                return response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Phone validation error: {e}")
            return None
