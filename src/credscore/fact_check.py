"""
Google Fact Check Tools client.
https://toolbox.google.com/factcheck/apis

Every outcome, including transport failures, is returned as a FactCheckVerdict.
Only the first claim's first review is used.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

import httpx

from .config import Settings, get_settings
from .errors import ConfigurationMissing
from .models import (
    ErrorVerdict,
    FactCheckVerdict,
    NoResultVerdict,
    UnavailableVerdict,
    VerifiedVerdict,
)

logger = logging.getLogger(__name__)

NOT_CONFIGURED = "not configured"
MALFORMED = "malformed response from fact-check service"
UNRATED = frozenset({"unrated", "not rated", "no rating"})


def normalize_response(payload: Any) -> FactCheckVerdict:
    """Reduce a claims:search response to a single verdict."""
    if not isinstance(payload, dict):
        return ErrorVerdict(message=MALFORMED)

    claims = payload.get("claims")
    if not claims:
        return NoResultVerdict()
    if not isinstance(claims, list) or not isinstance(claims[0], dict):
        return ErrorVerdict(message=MALFORMED)

    first = claims[0]
    reviews = first.get("claimReview") or []
    if not isinstance(reviews, list):
        return ErrorVerdict(message=MALFORMED)
    if not reviews:
        return NoResultVerdict()
    review = reviews[0]
    if not isinstance(review, dict):
        return ErrorVerdict(message=MALFORMED)

    rating = str(review.get("textualRating") or "").strip()
    if not rating or rating.lower() in UNRATED:
        # unrated review, nothing to blend
        return NoResultVerdict()
    publisher = review.get("publisher")
    publisher_name = publisher.get("name") if isinstance(publisher, dict) else None
    return VerifiedVerdict(
        rating=rating,
        publisher=str(publisher_name or "Unknown"),
        claim_text=first.get("text"),
        review_url=review.get("url"),
    )


@runtime_checkable
class FactChecker(Protocol):
    @property
    def configured(self) -> bool:
        ...

    async def verify_claim(self, text: str) -> FactCheckVerdict:
        ...


class FactCheckClient:
    """Query external fact-checking API"""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._transport = transport
        self.timeout = self._settings.fact_check_timeout

    @property
    def configured(self) -> bool:
        return bool(self._settings.fact_check_api_key)

    def _api_key(self) -> str:
        api_key = self._settings.fact_check_api_key
        if not api_key:
            raise ConfigurationMissing("FACT_CHECK_API_KEY is not set")
        return api_key

    async def verify_claim(self, text: str) -> FactCheckVerdict:
        try:
            api_key = self._api_key()
        except ConfigurationMissing as exc:
            logger.warning("%s. Skipping fact check.", exc)
            return UnavailableVerdict(reason=NOT_CONFIGURED)

        params = {
            "query": text,
            "key": api_key,
            "languageCode": self._settings.fact_check_language_code,
            "pageSize": self._settings.fact_check_page_size,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self._settings.fact_check_api_url, params=params)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error("Fact Check API returned %s", exc.response.status_code)
            return ErrorVerdict(message=f"API error: {exc.response.status_code}")
        except httpx.HTTPError as exc:
            logger.error("Error calling Fact Check API: %s", exc)
            return ErrorVerdict(message="Failed to communicate with fact-check service")
        except ValueError:
            logger.error("Fact Check API returned a non-JSON body")
            return ErrorVerdict(message=MALFORMED)

        verdict = normalize_response(payload)
        logger.debug("Fact check verdict: %s", verdict)
        return verdict
