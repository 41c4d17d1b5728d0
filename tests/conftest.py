# tests/conftest.py
import json

import httpx
import pytest

from pickem.models import (
    SteamInventory,
    TournamentItems,
    TournamentLayout,
    UserAuthParams,
)


# Markers for test categorization
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")


@pytest.fixture
def raw_layout_response():
    """GetTournamentLayout payload: two sections, three resolved groups, one open."""
    return {
        "result": {
            "sections": [
                {
                    "sectionid": 1,
                    "name": "Challengers Stage",
                    "groups": [
                        {
                            "groupid": 101,
                            "name": "Match 1",
                            "points_per_pick": 1,
                            "picks_allowed": False,
                            "teams": [
                                {"pickid": 1, "name": "Unknown"},
                                {"pickid": 2, "name": "Team B"},
                            ],
                            "picks": [{"index": 0, "pickids": [1]}],
                        },
                        {
                            "groupid": 102,
                            "name": "Match 2",
                            "points_per_pick": 1,
                            "picks_allowed": False,
                            "teams": [
                                {"pickid": 3, "name": "Team C"},
                                {"pickid": 4, "name": "Unknown"},
                            ],
                            "picks": [{"index": 0, "pickids": [4]}],
                        },
                    ],
                },
                {
                    "sectionid": 2,
                    "name": "Legends Stage",
                    "groups": [
                        {
                            "groupid": 201,
                            "name": "Match 3",
                            "points_per_pick": 2,
                            "picks_allowed": False,
                            "teams": [
                                {"pickid": 1, "name": "Unknown"},
                                {"pickid": 4, "name": "Unknown"},
                            ],
                            "picks": [{"index": 0, "pickids": [1]}],
                        },
                        {
                            "groupid": 202,
                            "name": "Match 4",
                            "points_per_pick": 2,
                            "picks_allowed": True,
                            "teams": [
                                {"pickid": 2, "name": "Team B"},
                                {"pickid": 3, "name": "Team C"},
                            ],
                            "picks": [],
                        },
                    ],
                },
            ]
        }
    }


@pytest.fixture
def sample_layout(raw_layout_response):
    return TournamentLayout.model_validate(raw_layout_response["result"])


@pytest.fixture
def raw_items_response():
    return {
        "result": {
            "items": [
                {"itemid": "900001", "type": "team", "teamid": 1},
                {"itemid": "900004", "type": "team", "teamid": 4},
                {"itemid": "900050", "type": "player", "playerid": 50},
            ]
        }
    }


@pytest.fixture
def sample_items(raw_items_response):
    return TournamentItems.model_validate(raw_items_response["result"])


@pytest.fixture
def raw_inventory_response():
    return {
        "assets": [
            {"appid": 730, "contextid": "2", "assetid": "900001", "classid": "111", "instanceid": "0", "amount": "1"},
            {"appid": 730, "contextid": "2", "assetid": "900004", "classid": "444", "instanceid": "0", "amount": "1"},
        ],
        "descriptions": [
            {"appid": 730, "classid": "111", "instanceid": "0",
             "market_name": "Sticker | Natus Vincere | Budapest 2025"},
            {"appid": 730, "classid": "444", "instanceid": "0",
             "market_name": "Sticker | FaZe Clan | Budapest 2025"},
        ],
        "total_inventory_count": 2,
        "success": 1,
    }


@pytest.fixture
def sample_inventory(raw_inventory_response):
    return SteamInventory.model_validate(raw_inventory_response)


@pytest.fixture
def auth_params():
    return UserAuthParams(event_id=25, steam_id="76561198012345678", auth_code="ABCD-EFGH1-JKLM")


@pytest.fixture
def route_transport():
    """
    Build an ``httpx.MockTransport`` that answers by URL path.

    Each route value is either a (status, payload) tuple or a list of them,
    consumed one per request. Every request is recorded on ``transport.calls``.
    """
    def build(routes):
        queues = {path: list(resp) if isinstance(resp, list) else resp for path, resp in routes.items()}
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            for path, resp in queues.items():
                if request.url.path.endswith(path):
                    if isinstance(resp, list):
                        resp = resp.pop(0) if len(resp) > 1 else resp[0]
                    status, payload = resp
                    headers = {}
                    if isinstance(payload, tuple):
                        payload, headers = payload
                    return httpx.Response(status, content=json.dumps(payload), headers=headers)
            return httpx.Response(404, content=b"{}")

        transport = httpx.MockTransport(handler)
        transport.calls = calls
        return transport

    return build
