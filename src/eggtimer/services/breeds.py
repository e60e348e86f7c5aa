"""Breed catalog — a random chicken breed to look at while the egg cooks.

Purely decorative.  Any failure to reach or decode the remote catalog falls
back to a fixed local list; nothing here ever raises into the caller.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Optional

import requests

_LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class Breed:
    name: str
    origin: str
    description: str


FALLBACK_BREEDS: tuple[Breed, ...] = (
    Breed("Leghorn", "Italy", "A light, active breed known for laying white eggs almost daily."),
    Breed("Rhode Island Red", "United States", "Hardy dual-purpose bird that lays brown eggs."),
    Breed("Sussex", "England", "Calm and curious, a steady layer of cream to light brown eggs."),
    Breed("Orpington", "England", "Large, fluffy and docile; lays light brown eggs."),
    Breed("Araucana", "Chile", "Famous for its blue-shelled eggs."),
    Breed("Marans", "France", "Lays some of the darkest chocolate-brown eggs of any breed."),
    Breed("Silkie", "China", "Fur-like plumage and black skin; a small but broody layer."),
)


class BreedCatalog:
    """Fetches a random breed from a remote catalog, with a local fallback.

    The remote endpoint is expected to answer with a JSON object or a list of
    objects carrying ``name`` and optionally ``origin`` and ``description``.
    Without a *url* the local list is always used.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._session = session if session is not None else requests.Session()
        self._rng = rng if rng is not None else random.Random()

    def random_breed(self) -> Breed:
        if self._url:
            breed = self._fetch()
            if breed is not None:
                return breed
        return self._rng.choice(FALLBACK_BREEDS)

    def _fetch(self) -> Optional[Breed]:
        try:
            response = self._session.get(self._url, timeout=self._timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            _LOGGER.warning("Breed catalog unavailable, using local list: %s", exc)
            return None

        if isinstance(payload, list):
            if not payload:
                _LOGGER.debug("Breed catalog returned no entries")
                return None
            payload = self._rng.choice(payload)
        return _parse_breed(payload)


def _parse_breed(payload: Any) -> Optional[Breed]:
    if not isinstance(payload, dict) or not payload.get("name"):
        _LOGGER.debug("Ignoring malformed breed record: %r", payload)
        return None
    return Breed(
        name=str(payload["name"]),
        origin=str(payload.get("origin") or "unknown"),
        description=str(payload.get("description") or ""),
    )
