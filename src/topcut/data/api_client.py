"""Scryfall API client for commander card art.

Handles all communication with the Scryfall API including:
- Rate limiting with adaptive delays
- Retry logic with exponential backoff
- Concurrent lookups for several commanders, joined before returning

Card art is presentation metadata: a failed lookup never blocks the
statistics, it just yields a placeholder with no image URLs.

Key Classes:
    ScryfallClient - HTTP client for Scryfall
    CardImages - Art crop / full image URLs for one card

Usage:
    from topcut.data.api_client import ScryfallClient

    client = ScryfallClient()
    images = client.fetch_card_images(["Kraum, Ludevic's Opus", "Tymna the Weaver"])
"""

from __future__ import annotations

import logging
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import requests

from topcut.config import MAX_FETCH_WORKERS, MAX_RETRIES, REQUEST_DELAY, SCRYFALL_BASE_URL

logger = logging.getLogger(__name__)

ENDPOINTS = {
    "named": f"{SCRYFALL_BASE_URL}/cards/named",
}

# Rate limiting constants (not in config - implementation details)
MAX_DELAY = 30  # Maximum backoff delay in seconds
RATE_LIMIT_STATUS = 429  # HTTP "Too Many Requests"
NOT_FOUND_STATUS = 404


@dataclass(frozen=True)
class CardImages:
    """Image URLs for a single card; both None when unavailable."""

    name: str
    art: Optional[str] = None
    full: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"name": self.name, "art": self.art, "full": self.full}


def parse_card_images(name: str, card: Dict[str, Any]) -> CardImages:
    """Extract art_crop / large URLs, using the front face of double-faced cards."""
    faces = card.get("card_faces") or []
    if faces and faces[0].get("image_uris"):
        uris = faces[0]["image_uris"]
    else:
        uris = card.get("image_uris") or {}

    return CardImages(
        name=name,
        art=uris.get("art_crop") or uris.get("normal"),
        full=uris.get("large") or uris.get("normal"),
    )


class ScryfallClient:
    """HTTP client for Scryfall with rate limiting and retries."""

    def __init__(self, max_workers: int = MAX_FETCH_WORKERS):
        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": "topcut/0.1",
            "Accept": "application/json",
        })
        self.max_workers = max_workers
        self._current_delay = REQUEST_DELAY
        # workers in fetch_card_images share the adaptive delay
        self._lock = threading.Lock()

    def _delay(self) -> float:
        with self._lock:
            return self._current_delay

    def _back_off(self) -> float:
        with self._lock:
            self._current_delay = min(self._current_delay * 2, MAX_DELAY)
            return self._current_delay

    def _recover(self) -> None:
        with self._lock:
            self._current_delay = max(REQUEST_DELAY, self._current_delay * 0.9)

    def _get(self, url: str, params: Optional[Dict] = None, retries: int = MAX_RETRIES) -> Optional[Dict]:
        """Make GET request with retry logic and adaptive rate limiting."""
        for attempt in range(retries):
            try:
                delay = self._delay()
                time.sleep(delay + random.uniform(0, 0.3 * delay))

                resp = self.session.get(url, params=params, timeout=10)

                if resp.status_code == NOT_FOUND_STATUS:
                    logger.info(f"Not found: {params}")
                    return None

                if resp.status_code == RATE_LIMIT_STATUS:
                    retry_after = int(resp.headers.get("Retry-After", 1))
                    delay = self._back_off()
                    logger.warning(
                        f"Rate limited (429). Waiting {retry_after}s. "
                        f"Delay now: {delay}s"
                    )
                    time.sleep(retry_after)
                    continue

                resp.raise_for_status()

                self._recover()
                return resp.json()

            except requests.RequestException as e:
                wait_time = min(2 ** attempt + random.uniform(0, 1), MAX_DELAY)
                logger.warning(
                    f"Request failed (attempt {attempt + 1}/{retries}): {e}. "
                    f"Retrying in {wait_time:.1f}s"
                )
                if attempt < retries - 1:
                    time.sleep(wait_time)

        logger.error(f"All {retries} attempts failed for {url} {params}")
        return None

    def get_card(self, name: str) -> Optional[Dict]:
        """Exact-name card lookup."""
        logger.info(f"Fetching card {name}...")
        return self._get(ENDPOINTS["named"], params={"exact": name})

    def get_card_images(self, name: str) -> CardImages:
        """Image URLs for one card, or a placeholder if the lookup fails."""
        card = self.get_card(name)
        if card is None:
            return CardImages(name=name)
        return parse_card_images(name, card)

    def fetch_card_images(self, names: Sequence[str]) -> List[CardImages]:
        """Look up several cards concurrently and wait for all of them.

        Results come back in the order of ``names``. Any exception raised
        by a single lookup turns into a placeholder for that card.
        """
        if not names:
            return []

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(names))) as pool:
            futures = [pool.submit(self.get_card_images, name) for name in names]

        results = []
        for name, future in zip(names, futures):
            try:
                results.append(future.result())
            except Exception as e:
                logger.warning(f"Card image lookup failed for {name}: {e}")
                results.append(CardImages(name=name))
        return results
