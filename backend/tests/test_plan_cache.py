import json

import httpx

from velvet_routes.client.plan_cache import DEFAULT_PLAN, PlanCache
from velvet_routes.client.wizard import WizardState, select_destination


def _cache(tmp_path, handler):
    return PlanCache(
        "http://api.test",
        token="tok",
        cache_path=tmp_path / "plan.json",
        transport=httpx.MockTransport(handler),
    )


def _offline(request):
    raise httpx.ConnectError("unreachable", request=request)


async def test_save_posts_and_writes_locally(tmp_path):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"success": True, "data": {}})

    cache = _cache(tmp_path, handler)
    await cache.save({"destination": "Goa"})

    assert json.loads((tmp_path / "plan.json").read_text())["destination"] == "Goa"
    assert len(seen) == 1
    assert seen[0].method == "POST"
    assert seen[0].url.path == "/api/plans/save-current"
    assert seen[0].headers["Authorization"] == "Bearer tok"


async def test_save_survives_api_outage(tmp_path):
    cache = _cache(tmp_path, _offline)
    await cache.save({"destination": "Goa"})
    assert json.loads((tmp_path / "plan.json").read_text()) == {"destination": "Goa"}


async def test_save_survives_server_error(tmp_path):
    cache = _cache(tmp_path, lambda request: httpx.Response(500, json={"success": False}))
    await cache.save({"destination": "Goa"})
    assert (tmp_path / "plan.json").exists()


async def test_load_prefers_api(tmp_path):
    (tmp_path / "plan.json").write_text(json.dumps({"destination": "Old"}))
    cache = _cache(
        tmp_path,
        lambda request: httpx.Response(200, json={"success": True, "data": {"destination": "Paris"}}),
    )

    plan = await cache.load()
    assert plan["destination"] == "Paris"
    assert plan["adults"] == 2
    # the cache is refreshed from the API copy
    assert json.loads((tmp_path / "plan.json").read_text())["destination"] == "Paris"


async def test_load_falls_back_to_local_then_default(tmp_path):
    cache = _cache(tmp_path, _offline)
    assert await cache.load() == DEFAULT_PLAN

    (tmp_path / "plan.json").write_text(json.dumps({"destination": "Goa"}))
    plan = await cache.load()
    assert plan == {**DEFAULT_PLAN, "destination": "Goa"}


async def test_load_ignores_empty_remote_and_corrupt_file(tmp_path):
    (tmp_path / "plan.json").write_text("{not json")
    cache = _cache(tmp_path, lambda request: httpx.Response(200, json={"success": True, "data": None}))
    assert await cache.load() == DEFAULT_PLAN


async def test_state_roundtrip_through_local_cache(tmp_path):
    cache = _cache(tmp_path, _offline)
    state = select_destination(WizardState(), "Goa", "Budget")
    await cache.save_state(state)
    assert await cache.load_state() == state


async def test_remote_nulls_take_defaults(tmp_path):
    remote = {"destination": "Paris", "budget": None, "departureDate": None, "adults": None}
    cache = _cache(tmp_path, lambda request: httpx.Response(200, json={"success": True, "data": remote}))

    plan = await cache.load()
    assert plan["destination"] == "Paris"
    assert plan["budget"] == ""
    assert plan["departureDate"] == ""
    assert plan["adults"] == 2
