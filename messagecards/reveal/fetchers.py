"""Card sources for the reveal client."""
from __future__ import annotations

import logging
from typing import Optional, Protocol
from urllib.parse import quote

import httpx

from messagecards.cards.errors import CardNotFound
from messagecards.cards.models import Card
from messagecards.cards.service import CardService, get_card_service
from messagecards.config import runtime_config

logger = logging.getLogger(__name__)


class CardFetchError(RuntimeError):
    """Transport or server failure while fetching a card."""


class CardFetcher(Protocol):
    async def fetch(self, card_id: str) -> Card: ...


class ServiceCardFetcher:
    """Reads straight from an in-process CardService."""

    def __init__(self, service: Optional[CardService] = None) -> None:
        self._service = service

    async def fetch(self, card_id: str) -> Card:
        return (self._service or get_card_service()).get_by_id(card_id)


class HttpCardFetcher:
    """Fetches `GET /cards/{id}` from the card API. No retries."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ) -> None:
        self._base_url = (base_url or runtime_config.get_cards_api_base_url()).rstrip("/")
        self._client = client
        self._timeout = timeout

    async def fetch(self, card_id: str) -> Card:
        url = f"{self._base_url}/cards/{quote(card_id, safe='')}"
        try:
            if self._client is not None:
                resp = await self._client.get(url)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.get(url)
        except httpx.HTTPError as exc:
            logger.info("card fetch failed id=%s: %s", card_id, exc)
            raise CardFetchError(str(exc)) from exc

        if resp.status_code == 404:
            raise CardNotFound(card_id)
        if resp.status_code != 200:
            raise CardFetchError(f"unexpected status {resp.status_code} fetching card {card_id}")
        try:
            return Card.model_validate(resp.json())
        except ValueError as exc:
            raise CardFetchError(f"malformed card payload: {exc}") from exc
