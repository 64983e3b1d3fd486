"""Google Maps web service client (places nearby search, geocoding)."""

import logging
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)


class GoogleMapsClient:
    """Thin HTTP client for the Google Maps JSON endpoints."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://maps.googleapis.com/maps/api",
        strict_timeout: float = 4.0,
        lenient_timeout: float = 12.0,
        max_retries: int = 2,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize Google Maps client.

        Args:
            api_key: Google Maps API key
            base_url: API root, without trailing slash
            strict_timeout: Timeout for the first (fast) attempt in seconds
            lenient_timeout: Timeout for the fallback attempt in seconds
            max_retries: Transport-level retries for 429/5xx responses
            session: Optional preconfigured session (used by tests)
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.strict_timeout = strict_timeout
        self.lenient_timeout = lenient_timeout

        if session is None:
            # Configure session with retry strategy
            # Status retries only; timeouts and connection errors go to the two-tier loop in _get
            session = requests.Session()
            retry_strategy = Retry(
                total=max_retries,
                connect=0,
                read=0,
                backoff_factor=0.5,
                status_forcelist=[429, 500, 502, 503, 504],
                allowed_methods=["GET"],
            )
            adapter = HTTPAdapter(max_retries=retry_strategy)
            session.mount("http://", adapter)
            session.mount("https://", adapter)
        self.session = session

    def _get(self, path: str, params: Dict[str, str]) -> Optional[Dict[str, Any]]:
        """
        GET a JSON endpoint with the two-tier timeout policy.

        Returns:
            Decoded response body, or None if both attempts failed
        """
        url = f"{self.base_url}/{path}"
        params = {**params, "key": self.api_key}

        last_error: Optional[Exception] = None
        for timeout in (self.strict_timeout, self.lenient_timeout):
            try:
                response = self.session.get(url, params=params, timeout=timeout)
                response.raise_for_status()
                return response.json()
            except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
                logger.warning(f"Google Maps {path} failed with timeout={timeout}s: {str(e)}")
                last_error = e
                continue
            except (requests.exceptions.RequestException, ValueError) as e:
                logger.warning(f"Google Maps {path} request error: {str(e)}")
                return None

        logger.error(f"Google Maps {path} unavailable. Last error: {str(last_error)}")
        return None

    @staticmethod
    def _results(body: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Results list of an OK envelope; anything else counts as not found."""
        if not isinstance(body, dict) or body.get("status") != "OK":
            return []
        results = body.get("results")
        if not isinstance(results, list):
            return []
        return [r for r in results if isinstance(r, dict)]

    def nearby_search(self, lat: float, lng: float, keyword: str) -> List[Dict[str, Any]]:
        """Places ranked by distance from the location matching the keyword."""
        body = self._get(
            "place/nearbysearch/json",
            {
                "location": f"{lat},{lng}",
                "rankby": "distance",
                "keyword": keyword,
            },
        )
        return self._results(body)

    def geocode(
        self,
        address: str,
        bounds: Optional[str] = None,
        components: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        params = {"address": address}
        if bounds:
            params["bounds"] = bounds
        if components:
            params["components"] = components
        return self._results(self._get("geocode/json", params))

    def reverse_geocode(self, lat: float, lng: float) -> List[Dict[str, Any]]:
        return self._results(self._get("geocode/json", {"latlng": f"{lat},{lng}"}))
