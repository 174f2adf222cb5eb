"""Client-side mirror of the current travel plan.

Remote calls are attempted once and never block longer than the configured
timeout; when the API is unreachable the local JSON file is authoritative for
the client until the next successful save.
"""

import json
import logging
from pathlib import Path

import httpx

from velvet_routes.client.wizard import WizardState, from_plan, to_plan_fields

logger = logging.getLogger(__name__)

DEFAULT_CACHE_PATH = Path.home() / ".velvet_routes" / "current_plan.json"

DEFAULT_PLAN = {
    "destination": "",
    "budget": "",
    "departureDate": "",
    "returnDate": "",
    "duration": 0,
    "adults": 2,
    "children": 0,
    "infants": 0,
    "flightClass": "",
    "localTransport": "",
    "hotel": "",
    "selectedHotel": None,
    "totalCost": 0,
}


def _with_defaults(plan: dict) -> dict:
    """Fill gaps from DEFAULT_PLAN; null fields take the default too."""
    return {**DEFAULT_PLAN, **{k: v for k, v in plan.items() if v is not None}}


class PlanCache:
    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        cache_path: Path = DEFAULT_CACHE_PATH,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.cache_path = Path(cache_path)
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=self._transport,
        )

    def _write_local(self, plan: dict) -> None:
        self.cache_path.parent.mkdir(parents=True, exist_ok=True)
        self.cache_path.write_text(json.dumps(plan, default=str), encoding="utf-8")

    def _read_local(self) -> dict | None:
        if not self.cache_path.is_file():
            return None
        try:
            return json.loads(self.cache_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable plan cache {self.cache_path}: {e}")
            return None

    async def save(self, plan: dict) -> None:
        """Persist locally, then try one remote upsert. Remote failures are logged, not raised."""
        self._write_local(plan)
        try:
            async with self._client() as client:
                resp = await client.post("/api/plans/save-current", json=plan)
                resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Could not save plan to API, using local cache only: {e}")

    async def load(self) -> dict:
        """Current plan from the API, else the local cache, else the default plan."""
        try:
            async with self._client() as client:
                resp = await client.get("/api/plans/current")
                resp.raise_for_status()
                remote = resp.json().get("data")
            if remote:
                self._write_local(remote)
                return _with_defaults(remote)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Could not load plan from API, using local cache: {e}")

        cached = self._read_local()
        if cached:
            return _with_defaults(cached)
        return dict(DEFAULT_PLAN)

    async def save_state(self, state: WizardState) -> None:
        await self.save(to_plan_fields(state))

    async def load_state(self) -> WizardState:
        return from_plan(await self.load())
