# Contains the adapter classes for communicating with the route ranking backend.

import logging
import os
from abc import ABC, abstractmethod

import requests
from dotenv import load_dotenv

from api_structures import SuggestionRequest, SuggestionResponse

logger = logging.getLogger(__name__)

# --- API Configuration ---
# Settings are read from environment variables (or a local .env file).
load_dotenv()
ROUTE_API_BASE_URL = os.getenv("ROUTE_API_BASE_URL", "http://localhost:8080")
ROUTE_API_TIMEOUT = float(os.getenv("ROUTE_API_TIMEOUT", "30"))


class RankingRequestError(Exception):
    """A ranking request failed. The message is meant to be shown to the user."""


class RankingApiAdapter(ABC):
    """
    Abstract Base Class (blueprint) for all ranking backends.
    Every adapter exposes the same public methods.
    """
    @abstractmethod
    def get_suggestions(self, request: SuggestionRequest) -> SuggestionResponse:
        """Requests ranked route suggestions. Raises RankingRequestError on failure."""
        pass

    @abstractmethod
    def check_health(self) -> dict:
        """Reports whether the backend is reachable."""
        pass


class HttpRankingAdapter(RankingApiAdapter):
    """The adapter for the HTTP ranking service."""
    SUGGESTIONS_PATH = "/suggestions"
    HEALTH_PATH = "/health"

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = (base_url or ROUTE_API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else ROUTE_API_TIMEOUT
        if not self.base_url:
            raise ValueError("The ROUTE_API_BASE_URL environment variable is empty.")

    def get_suggestions(self, request: SuggestionRequest) -> SuggestionResponse:
        url = self.base_url + self.SUGGESTIONS_PATH
        body = request.to_dict()
        logger.debug("POST %s %s", url, body)
        try:
            response = requests.post(url, json=body, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error("Could not reach the ranking service at %s: %s", url, e)
            raise RankingRequestError(f"Could not reach the ranking service: {e}") from e

        if not response.ok:
            text = response.text.strip()
            logger.error("Ranking request failed with status %s", response.status_code)
            raise RankingRequestError(text or f"Request failed ({response.status_code})")

        try:
            # *** NORMALIZATION to our standard SuggestionResponse object ***
            parsed = SuggestionResponse.from_dict(response.json())
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Could not parse the ranking response: %s", e)
            raise RankingRequestError(f"Unexpected response from the ranking service: {e}") from e

        logger.info("Received %d suggestion(s) from %s", len(parsed.suggestions), url)
        return parsed

    def check_health(self) -> dict:
        url = self.base_url + self.HEALTH_PATH
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            return {"healthy": False, "detail": str(e)}
        if not response.ok:
            return {"healthy": False, "detail": f"status {response.status_code}"}
        return {"healthy": True, "detail": "ok"}
