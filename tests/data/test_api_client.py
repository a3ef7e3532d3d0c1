"""Tests for the Scryfall card art client."""

from unittest.mock import MagicMock, Mock, patch

import pytest
import requests

from topcut.config import REQUEST_DELAY
from topcut.data.api_client import MAX_DELAY, CardImages, ScryfallClient, parse_card_images


def _response(status_code=200, payload=None, headers=None):
    resp = Mock()
    resp.status_code = status_code
    resp.headers = headers or {}
    resp.json.return_value = payload or {}
    resp.raise_for_status.return_value = None
    return resp


SINGLE_FACED = {
    "name": "Kinnan, Bonder Prodigy",
    "image_uris": {"art_crop": "https://img/kinnan-art.jpg", "large": "https://img/kinnan-large.jpg"},
}

DOUBLE_FACED = {
    "name": "Esika, God of the Tree // The Prismatic Bridge",
    "card_faces": [
        {"image_uris": {"art_crop": "https://img/esika-art.jpg", "large": "https://img/esika-large.jpg"}},
        {"image_uris": {"art_crop": "https://img/bridge-art.jpg", "large": "https://img/bridge-large.jpg"}},
    ],
}


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("topcut.data.api_client.time.sleep"):
        yield


@pytest.fixture
def client():
    client = ScryfallClient(max_workers=2)
    client.session = Mock()
    return client


class TestParseCardImages:

    def test_single_faced(self):
        images = parse_card_images("Kinnan, Bonder Prodigy", SINGLE_FACED)
        assert images.art == "https://img/kinnan-art.jpg"
        assert images.full == "https://img/kinnan-large.jpg"

    def test_double_faced_uses_front(self):
        images = parse_card_images("Esika, God of the Tree", DOUBLE_FACED)
        assert images.art == "https://img/esika-art.jpg"
        assert images.full == "https://img/esika-large.jpg"

    def test_no_images(self):
        images = parse_card_images("Mystery", {})
        assert images == CardImages(name="Mystery")


class TestGet:

    def test_found(self, client):
        client.session.get.return_value = _response(payload=SINGLE_FACED)
        images = client.get_card_images("Kinnan, Bonder Prodigy")
        assert images.art == "https://img/kinnan-art.jpg"
        _, kwargs = client.session.get.call_args
        assert kwargs["params"] == {"exact": "Kinnan, Bonder Prodigy"}

    def test_not_found_is_placeholder(self, client):
        client.session.get.return_value = _response(status_code=404)
        assert client.get_card("Not A Card") is None
        assert client.get_card_images("Not A Card") == CardImages(name="Not A Card")
        # 404 is final, no retries
        assert client.session.get.call_count == 2

    def test_rate_limit_then_success(self, client):
        client.session.get.side_effect = [
            _response(status_code=429, headers={"Retry-After": "1"}),
            _response(payload=SINGLE_FACED),
        ]
        assert client.get_card("Kinnan, Bonder Prodigy") == SINGLE_FACED
        assert client.session.get.call_count == 2

    def test_gives_up_after_retries(self, client):
        client.session.get.side_effect = requests.ConnectionError("offline")
        assert client.get_card("Kinnan, Bonder Prodigy") is None
        assert client.session.get.call_count == 3


class TestFetchCardImages:

    def test_preserves_order(self, client):
        payloads = {"Tymna the Weaver": DOUBLE_FACED, "Kinnan, Bonder Prodigy": SINGLE_FACED}
        client.session.get.side_effect = lambda url, params, timeout: _response(payload=payloads[params["exact"]])
        images = client.fetch_card_images(["Tymna the Weaver", "Kinnan, Bonder Prodigy"])
        assert [i.name for i in images] == ["Tymna the Weaver", "Kinnan, Bonder Prodigy"]
        assert images[1].art == "https://img/kinnan-art.jpg"

    def test_failed_lookup_becomes_placeholder(self, client):
        def lookup(name):
            if name == "Broken":
                raise RuntimeError("boom")
            return CardImages(name=name, art="https://img/a.jpg")

        with patch.object(client, "get_card_images", side_effect=lookup):
            images = client.fetch_card_images(["Broken", "Fine"])
        assert images[0] == CardImages(name="Broken")
        assert images[1].art == "https://img/a.jpg"

    def test_empty(self, client):
        assert client.fetch_card_images([]) == []

    def test_rate_limits_across_workers_update_shared_delay(self, client):
        names = [f"Card {i}" for i in range(8)]
        limited = set()

        def respond(url, params, timeout):
            if params["exact"] not in limited:
                limited.add(params["exact"])
                return _response(status_code=429, headers={"Retry-After": "0"})
            return _response(payload=SINGLE_FACED)

        client.session.get.side_effect = respond
        images = client.fetch_card_images(names)
        assert all(i.art == "https://img/kinnan-art.jpg" for i in images)
        assert limited == set(names)
        assert REQUEST_DELAY <= client._current_delay <= MAX_DELAY

    def test_delay_updates_hold_the_lock(self, client):
        client._lock = MagicMock()
        client.session.get.side_effect = [
            _response(status_code=429, headers={"Retry-After": "0"}),
            _response(payload=SINGLE_FACED),
        ]
        client.get_card("Kinnan, Bonder Prodigy")
        # read, back off, read, recover
        assert client._lock.__enter__.call_count == 4
