"""Integration tests for the FastAPI routes using httpx."""

from __future__ import annotations

import copy
from typing import Any, Dict

import pytest
from httpx import ASGITransport, AsyncClient

from compartment_lab.main import app
from compartment_lab.scene import load_scene_data


def _client() -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")


def _passive_scene(k_conductance: float) -> Dict[str, Any]:
    channel = {"activation": None, "inactivation": None, "ion_selectivity": {"k": 1.0}}
    return {
        "neurons": [
            {
                "neuron": {
                    "segments": [{"id": 1, "type": 1, "x": 0.0, "y": 0.0, "z": 0.0, "r": 1.0}],
                    "membranes": [
                        {"membrane_channels": [{"channel": channel, "siemens_per_square_cm": k_conductance}]}
                    ],
                }
            }
        ]
    }


@pytest.mark.anyio("asyncio")
async def test_health_and_root() -> None:
    async with _client() as client:
        root = await client.get("/")
        health = await client.get("/health")
    assert root.status_code == 200
    assert health.json() == root.json()
    assert health.json()["status"] == "ok"


@pytest.mark.anyio("asyncio")
async def test_channel_library_endpoint() -> None:
    async with _client() as client:
        response = await client.get("/channels")
    assert response.status_code == 200
    channels = response.json()["channels"]
    assert channels["giant_squid.na"]["activation"]["gates"] == 3
    assert channels["giant_squid.na"]["activation"]["time_constant"]["type"] == "Sigmoid"


@pytest.mark.anyio("asyncio")
async def test_scene_listing_and_lookup() -> None:
    async with _client() as client:
        listing = await client.get("/scenes")
        scene = await client.get("/scenes/giant_squid_soma")
        missing = await client.get("/scenes/not_bundled")
    assert "giant_squid_soma" in listing.json()["scenes"]
    assert len(scene.json()["neurons"][0]["neuron"]["segments"]) == 3
    assert missing.status_code == 404
    detail = missing.json()["detail"]
    assert detail["code"] == "scene_not_found"
    assert "excitatory_pair" in detail["context"]["available"]


@pytest.mark.anyio("asyncio")
async def test_simulate_bundled_scene() -> None:
    payload = {"scene_name": "giant_squid_soma", "steps": 200, "record_every": 10}
    async with _client() as client:
        response = await client.post("/simulate", json=payload)
    assert response.status_code == 200
    body = response.json()
    assert len(body["time"]) == 21
    assert len(body["voltages"]) == 1
    assert len(body["voltages"][0]) == 3
    assert len(body["voltages"][0][0]) == 21
    assert body["voltages"][0][0][0] == -70.0
    assert body["summary"]["samples"] == 21
    assert len(body["summary"]["neurons"][0]["segments"]) == 3


@pytest.mark.anyio("asyncio")
async def test_simulate_inline_synapse_scene() -> None:
    payload = {"scene": load_scene_data("excitatory_pair"), "steps": 100, "record_every": 50}
    async with _client() as client:
        response = await client.post("/simulate", json=payload)
    assert response.status_code == 200
    assert len(response.json()["voltages"]) == 2


@pytest.mark.anyio("asyncio")
@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"scene_name": "giant_squid_soma", "scene": {"neurons": []}},
        {"scene_name": "giant_squid_soma", "dt": 0.5},
        {"scene_name": "giant_squid_soma", "steps": 0},
    ],
)
async def test_simulate_rejects_malformed_requests(payload: Dict[str, Any]) -> None:
    async with _client() as client:
        response = await client.post("/simulate", json=payload)
    assert response.status_code == 422


@pytest.mark.anyio("asyncio")
async def test_simulate_reports_invalid_scene() -> None:
    scene = copy.deepcopy(load_scene_data("giant_squid_soma"))
    scene["neurons"][0]["neuron"]["segments"][1]["type"] = 5
    async with _client() as client:
        response = await client.post("/simulate", json={"scene": scene, "steps": 10})
    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "invalid_scene"


@pytest.mark.anyio("asyncio")
async def test_simulate_reports_undefined_reversal_potential() -> None:
    payload = {
        "scene": _passive_scene(1e-3),
        "steps": 10,
        "extracellular": {"na": 0.145, "k": 0.0, "ca": 0.002, "cl": 0.11},
    }
    async with _client() as client:
        response = await client.post("/simulate", json=payload)
    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "invalid_scene"


@pytest.mark.anyio("asyncio")
async def test_simulate_reports_divergence() -> None:
    payload = {"scene": _passive_scene(1e3), "steps": 500, "dt": 1e-3}
    async with _client() as client:
        response = await client.post("/simulate", json=payload)
    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["code"] == "simulation_diverged"
    assert detail["context"]["neuron"] == 0
    assert detail["context"]["segment"] == 0
    assert detail["context"]["tick"] > 0
