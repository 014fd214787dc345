# clients/dropdowns.py
from __future__ import annotations

import logging
from typing import Any, Dict, List

from clients.matrimony import MatrimonyAPIError, MatrimonyClient
from core.options import unwrap_payload

logger = logging.getLogger(__name__)

BUNDLE_PATH = "/profile/dropdowns"
LEGACY_OPTIONS_PATH = "/options"
LEGACY_COUNTRIES_PATH = "/get-countries"


class DropdownService:
    """
    Raw option payloads for every picker. Shapes are left as the server sent
    them; core.options.resolve_options does the normalizing.
    """

    def __init__(self, client: MatrimonyClient):
        self.client = client

    async def _simple(self, path: str, params: Dict[str, Any] | None = None, *keys: str) -> Any:
        body = await self.client.get(path, params=params)
        return unwrap_payload(body, *keys)

    async def bundle(self) -> Dict[str, Any]:
        """{religions, marital_statuses, countries, blood_groups} in one call; {} when the envelope is not a success."""
        body = await self.client.get(BUNDLE_PATH)
        if isinstance(body, dict) and body.get("status") == "success":
            data = body.get("data")
            return data if isinstance(data, dict) else {}
        return {}

    async def religions(self) -> Any:
        try:
            return await self._simple("/dropdowns/religions")
        except MatrimonyAPIError:
            logger.info("religions endpoint failed, trying %s", LEGACY_OPTIONS_PATH)
            body = await self.client.get(LEGACY_OPTIONS_PATH)
            if not isinstance(body, dict):
                return []
            data = body.get("data") if isinstance(body.get("data"), dict) else {}
            return body.get("religions") or data.get("religions") or []

    async def castes(self, religion_id: str) -> Any:
        try:
            return await self._simple("/dropdowns/castes", {"religion_id": religion_id}, "castes")
        except MatrimonyAPIError:
            logger.info("castes endpoint failed, trying %s", LEGACY_OPTIONS_PATH)
            body = await self.client.get(LEGACY_OPTIONS_PATH)
            if not isinstance(body, dict):
                return []
            by_religion = body.get("castes_by_religion") or {}
            if isinstance(by_religion, dict) and by_religion.get(str(religion_id)):
                return by_religion[str(religion_id)]
            data = body.get("data") if isinstance(body.get("data"), dict) else {}
            flat = body.get("castes") or data.get("castes") or []
            return _filter_by_religion(flat, religion_id)

    async def countries(self) -> Any:
        try:
            return await self._simple("/dropdowns/countries")
        except MatrimonyAPIError:
            logger.info("countries endpoint failed, trying %s", LEGACY_COUNTRIES_PATH)
            return await self._simple(LEGACY_COUNTRIES_PATH)

    async def states(self, country_id: str) -> Any:
        return await self._simple("/dropdowns/states", {"country_id": country_id}, "states")

    async def cities(self, state_id: str) -> Any:
        return await self._simple("/dropdowns/cities", {"state_id": state_id}, "cities")

    async def marital_statuses(self) -> Any:
        return await self._simple("/dropdowns/marital-status")

    async def blood_groups(self) -> Any:
        return await self._simple("/dropdowns/blood-groups")


def _filter_by_religion(flat: Any, religion_id: str) -> List[Any]:
    if not isinstance(flat, list):
        return []
    out = []
    for c in flat:
        if not isinstance(c, dict):
            continue
        rel = c.get("religion_id", c.get("religionId", c.get("rel_id")))
        if str(rel) == str(religion_id):
            out.append(c)
    return out
