"""Tests for the decorative breed catalog."""

import random
from unittest.mock import MagicMock

import requests

from eggtimer.services.breeds import FALLBACK_BREEDS, Breed, BreedCatalog


def _http(payload=None, error: Exception | None = None) -> MagicMock:
    session = MagicMock(spec=requests.Session)
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value.json.return_value = payload
    return session


class TestBreedCatalog:
    """Remote records are used when usable, the local list otherwise."""

    def test_without_url_uses_local_list(self) -> None:
        session = _http()
        breed = BreedCatalog(session=session, rng=random.Random(1)).random_breed()
        assert breed in FALLBACK_BREEDS
        session.get.assert_not_called()

    def test_remote_record(self) -> None:
        session = _http({"name": "Brahma", "origin": "United States", "description": "Huge."})
        breed = BreedCatalog(url="http://catalog.test/random", session=session).random_breed()
        assert breed == Breed("Brahma", "United States", "Huge.")
        session.get.assert_called_once_with("http://catalog.test/random", timeout=10.0)

    def test_remote_list_picks_one(self) -> None:
        session = _http([{"name": "Cochin"}])
        breed = BreedCatalog(url="http://catalog.test", session=session).random_breed()
        assert breed == Breed("Cochin", "unknown", "")

    def test_timeout_falls_back(self) -> None:
        session = _http(error=requests.Timeout("slow"))
        breed = BreedCatalog(url="http://catalog.test", session=session).random_breed()
        assert breed in FALLBACK_BREEDS

    def test_http_error_falls_back(self) -> None:
        session = _http({"name": "Brahma"})
        session.get.return_value.raise_for_status.side_effect = requests.HTTPError("503")
        breed = BreedCatalog(url="http://catalog.test", session=session).random_breed()
        assert breed in FALLBACK_BREEDS

    def test_empty_list_falls_back(self) -> None:
        breed = BreedCatalog(url="http://catalog.test", session=_http([])).random_breed()
        assert breed in FALLBACK_BREEDS

    def test_undecodable_body_falls_back(self) -> None:
        session = _http()
        session.get.return_value.json.side_effect = ValueError("no json")
        breed = BreedCatalog(url="http://catalog.test", session=session).random_breed()
        assert breed in FALLBACK_BREEDS

    def test_malformed_record_falls_back(self) -> None:
        session = _http({"breed": "nameless"})
        breed = BreedCatalog(url="http://catalog.test", session=session).random_breed()
        assert breed in FALLBACK_BREEDS
