import asyncio
from typing import Any, Dict, List

import httpx

from clients.matrimony import MatrimonyAPIError
from core.dependent_fields import DependentFieldGraph
from core.options import Option
from memory.models import default_form_state


CASTES = {
    "1": [{"id": 7, "name": "Brahmin"}, {"id": 8, "name": "Nadar"}],
    "2": [{"id": 20, "name": "Latin Catholic"}, {"id": 21, "name": "brahmin"}],
    "3": [],
}
STATES = {"IN": {"TN": "Tamil Nadu", "KA": "Karnataka"}}
CITIES = {"TN": ["Chennai", "Madurai"], "KA": ["Bengaluru"]}


class Recorder:
    def __init__(self) -> None:
        self.calls: List[tuple[str, str]] = []

    def fetchers(self) -> Dict[str, Any]:
        async def castes(rid: str) -> Any:
            self.calls.append(("castes", rid))
            return CASTES.get(rid, [])

        async def states(cid: str) -> Any:
            self.calls.append(("states", cid))
            return STATES.get(cid, {})

        async def cities(sid: str) -> Any:
            self.calls.append(("cities", sid))
            return CITIES.get(sid, [])

        return {"castes": castes, "states": states, "cities": cities}


def _graph(**form_values: str):
    form = default_form_state()
    form.update(form_values)
    rec = Recorder()
    return DependentFieldGraph(form, rec.fetchers()), form, rec


def test_religion_change_clears_caste_and_fetches_new_list() -> None:
    graph, form, rec = _graph(religion_id="", caste="")

    changed = asyncio.run(graph.set_value("religion_id", "3"))

    assert changed is True
    assert rec.calls == [("castes", "3")]
    assert form["caste"] == ""
    assert graph.options["caste"] == []


def test_setting_same_religion_twice_does_not_refetch() -> None:
    graph, form, rec = _graph()

    asyncio.run(graph.set_value("religion_id", "1"))
    form["caste"] = "7"
    changed = asyncio.run(graph.set_value("religion_id", "1"))

    assert changed is False
    assert rec.calls == [("castes", "1")]
    assert form["caste"] == "7"


def test_caste_name_carries_over_to_new_religion_by_name() -> None:
    graph, form, rec = _graph()
    asyncio.run(graph.set_value("religion_id", "1"))
    form["caste"] = "7"  # Brahmin under religion 1

    asyncio.run(graph.set_value("religion_id", "2"))

    # "Brahmin" matches "brahmin" (id 21) case-insensitively
    assert form["caste"] == "21"
    assert [o.name for o in graph.options["caste"]] == ["Latin Catholic", "brahmin"]


def test_caste_without_name_match_is_cleared_on_religion_change() -> None:
    graph, form, _ = _graph()
    asyncio.run(graph.set_value("religion_id", "1"))
    form["caste"] = "8"  # Nadar

    asyncio.run(graph.set_value("religion_id", "2"))

    assert form["caste"] == ""


def test_caste_name_is_reconciled_to_id_on_arrival() -> None:
    graph, form, _ = _graph(caste="Brahmin")

    graph.apply_options("caste", [Option("7", "Brahmin"), Option("8", "Nadar")])

    assert form["caste"] == "7"


def test_unmatched_legacy_value_is_preserved() -> None:
    graph, form, _ = _graph(city="Some Village")

    graph.apply_options("city", [Option("Chennai", "Chennai")])

    assert form["city"] == "Some Village"


def test_initialize_reconciles_the_location_chain() -> None:
    graph, form, rec = _graph(country="IN", state="tamil nadu", city="CHENNAI")

    asyncio.run(graph.initialize())

    assert form["state"] == "TN"
    assert form["city"] == "Chennai"
    assert ("cities", "TN") in rec.calls


def test_country_change_clears_state_and_city() -> None:
    graph, form, rec = _graph(country="IN", state="TN", city="Chennai")
    asyncio.run(graph.initialize())
    rec.calls.clear()

    asyncio.run(graph.set_value("country", "LK"))

    assert form["state"] == ""
    assert form["city"] == ""
    assert graph.options["city"] == []
    assert rec.calls == [("states", "LK")]


def test_state_change_refetches_cities_only() -> None:
    graph, form, rec = _graph(country="IN", state="TN", city="Chennai")
    asyncio.run(graph.initialize())
    rec.calls.clear()

    asyncio.run(graph.set_value("state", "KA"))

    assert form["city"] == ""
    assert rec.calls == [("cities", "KA")]
    assert [o.name for o in graph.options["city"]] == ["Bengaluru"]


def test_emptying_a_parent_clears_without_fetching() -> None:
    graph, form, rec = _graph(religion_id="1", caste="7")

    asyncio.run(graph.set_value("religion_id", ""))

    assert form["caste"] == ""
    assert rec.calls == []


def test_fetch_failure_leaves_empty_options_and_does_not_raise() -> None:
    form = default_form_state()

    async def broken(_: str) -> Any:
        raise MatrimonyAPIError("Server Error", status_code=500)

    async def offline(_: str) -> Any:
        raise httpx.ConnectError("offline")

    graph = DependentFieldGraph(form, {"castes": broken, "states": offline, "cities": offline})

    asyncio.run(graph.set_value("religion_id", "1"))
    asyncio.run(graph.set_value("country", "IN"))

    assert graph.options["caste"] == []
    assert graph.options["state"] == []


def test_stale_response_is_discarded() -> None:
    form = default_form_state()

    async def run() -> None:
        slow_release = asyncio.Event()

        async def castes(rid: str) -> Any:
            if rid == "1":
                await slow_release.wait()
                return [{"id": 7, "name": "Brahmin"}]
            return [{"id": 20, "name": "Latin Catholic"}]

        graph = DependentFieldGraph(form, {"castes": castes, "states": castes, "cities": castes})

        first = asyncio.create_task(graph.set_value("religion_id", "1"))
        await asyncio.sleep(0)
        await graph.set_value("religion_id", "2")
        slow_release.set()
        await first

        assert [o.name for o in graph.options["caste"]] == ["Latin Catholic"]

    asyncio.run(run())
