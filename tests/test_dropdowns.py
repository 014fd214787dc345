import asyncio

import pytest

from clients.dropdowns import DropdownService
from clients.matrimony import MatrimonyAPIError
from core.options import Option, resolve_options


def test_castes_primary_endpoint_sends_religion_id(fake_api) -> None:
    fake_api.routes[("GET", "/dropdowns/castes")] = {"status": "success", "data": [{"id": 7, "name": "Brahmin"}]}
    service = DropdownService(fake_api.client())

    raw = asyncio.run(service.castes("1"))

    assert resolve_options(raw) == [Option("7", "Brahmin")]
    assert fake_api.calls[0].url.params["religion_id"] == "1"


def test_castes_fall_back_to_options_by_religion(fake_api) -> None:
    fake_api.routes[("GET", "/dropdowns/castes")] = (500, {})
    fake_api.routes[("GET", "/options")] = {"castes_by_religion": {"2": [{"id": 20, "name": "Latin Catholic"}]}}
    service = DropdownService(fake_api.client())

    raw = asyncio.run(service.castes("2"))

    assert resolve_options(raw) == [Option("20", "Latin Catholic")]


def test_castes_fall_back_to_flat_list_filtered_by_religion(fake_api) -> None:
    fake_api.routes[("GET", "/dropdowns/castes")] = (500, {})
    fake_api.routes[("GET", "/options")] = {
        "data": {
            "castes": [
                {"id": 7, "name": "Brahmin", "religion_id": 1},
                {"id": 20, "name": "Latin Catholic", "religionId": "2"},
                {"id": 30, "name": "Sunni", "rel_id": 3},
            ]
        }
    }
    service = DropdownService(fake_api.client())

    raw = asyncio.run(service.castes("2"))

    assert resolve_options(raw) == [Option("20", "Latin Catholic")]


def test_religions_fall_back_to_legacy_options(fake_api) -> None:
    fake_api.routes[("GET", "/dropdowns/religions")] = (404, {})
    fake_api.routes[("GET", "/options")] = {"religions": {"1": "Hindu", "2": "Christian"}}
    service = DropdownService(fake_api.client())

    assert resolve_options(asyncio.run(service.religions())) == [Option("1", "Hindu"), Option("2", "Christian")]


def test_countries_fall_back_to_get_countries(fake_api) -> None:
    fake_api.routes[("GET", "/dropdowns/countries")] = (500, {})
    fake_api.routes[("GET", "/get-countries")] = {"IN": {"country": "India", "dial_code": "91"}}
    service = DropdownService(fake_api.client())

    assert resolve_options(asyncio.run(service.countries())) == [Option("IN", "India")]


def test_bundle_is_empty_unless_success(fake_api) -> None:
    fake_api.routes[("GET", "/profile/dropdowns")] = {"status": "error", "message": "nope"}
    service = DropdownService(fake_api.client())
    assert asyncio.run(service.bundle()) == {}


def test_states_error_propagates_to_caller(fake_api) -> None:
    fake_api.routes[("GET", "/dropdowns/states")] = (500, {})
    service = DropdownService(fake_api.client())
    with pytest.raises(MatrimonyAPIError):
        asyncio.run(service.states("IN"))


def test_blood_groups_and_marital_statuses_endpoints(fake_api) -> None:
    fake_api.routes[("GET", "/dropdowns/blood-groups")] = {"status": "success", "data": ["A+", "B+"]}
    fake_api.routes[("GET", "/dropdowns/marital-status")] = {"status": "success", "data": {"1": "Single"}}
    service = DropdownService(fake_api.client())

    assert resolve_options(asyncio.run(service.blood_groups())) == [Option("A+", "A+"), Option("B+", "B+")]
    assert resolve_options(asyncio.run(service.marital_statuses())) == [Option("1", "Single")]
