from __future__ import annotations

import logging
from types import SimpleNamespace

import pytest

from leaseright.core.config import settings
from leaseright.core.endpoints import LEASE_REQUEST, build_path
from leaseright.core.errors import extract_message
from leaseright.core.logger import get_logger
from leaseright.models.lease_request import VehicleType
from leaseright.services.listing import filter_items, paginate
from leaseright.services.local_store import LEASE_REQUESTS, LocalStore


def test_paginate_clamps_page_into_range() -> None:
    page = paginate(list(range(12)), page=9, per_page=5)
    assert page["page"] == 3
    assert page["items"] == [10, 11]
    assert page["total_pages"] == 3

    assert paginate([], page=0, per_page=5) == {
        "items": [], "page": 1, "per_page": 5, "total": 0, "total_pages": 1,
    }


def test_paginate_rejects_negative_page_size() -> None:
    with pytest.raises(ValueError):
        paginate([1, 2], per_page=-1)


def test_filter_items_by_status_and_search() -> None:
    items = [
        SimpleNamespace(id=1, status=None, preferred_model="Innova"),
        SimpleNamespace(id=2, status="approved", preferred_model="Creta"),
        SimpleNamespace(id=3, status="pending", preferred_model="innova hycross"),
    ]

    assert [i.id for i in filter_items(items, status="pending")] == [1, 3]
    assert [i.id for i in filter_items(items, status="all", search=" INNOVA ", fields=("preferred_model",))] == [1, 3]
    assert [i.id for i in filter_items(items, search="2")] == [2]


def test_filter_items_searches_enum_values_not_their_names() -> None:
    items = [
        SimpleNamespace(id=1, vehicle_type=VehicleType.SUV),
        SimpleNamespace(id=2, vehicle_type="ELECTRIC VAN"),
        SimpleNamespace(id=3, vehicle_type=None),
    ]

    assert filter_items(items, search="vehicletype", fields=("vehicle_type",)) == []
    assert [i.id for i in filter_items(items, search="suv", fields=("vehicle_type",))] == [1]
    assert [i.id for i in filter_items(items, search="van", fields=("vehicle_type",))] == [2]


def test_build_path_fills_and_quotes_parameters() -> None:
    assert build_path(LEASE_REQUEST["GET_BY_COMPANY"], companyId=7) == "/lease-requests/company/7"
    assert build_path("/admin/users/:id", id="a b/c") == "/admin/users/a%20b%2Fc"


def test_build_path_reports_bad_parameters() -> None:
    with pytest.raises(KeyError):
        build_path(LEASE_REQUEST["GET_BY_ID"], companyId=7)
    with pytest.raises(KeyError):
        build_path(LEASE_REQUEST["GET_BY_ID"])


@pytest.mark.parametrize(
    "payload, expected",
    [
        ({"error": {"message": "nested"}, "message": "flat"}, "nested"),
        ({"message": "flat", "error": "string"}, "flat"),
        ({"error": "string"}, "string"),
        ({"detail": "fastapi style"}, "fastapi style"),
        ("  plain text  ", "plain text"),
        ({}, "Something went wrong. Please try again."),
        (None, "Something went wrong. Please try again."),
    ],
)
def test_extract_message_precedence(payload, expected) -> None:
    assert extract_message(payload) == expected


def test_local_store_persists_between_instances(tmp_path) -> None:
    path = tmp_path / "nested" / "store.json"
    LocalStore(path).append(LEASE_REQUESTS, {"id": 1, "status": "pending"})

    store = LocalStore(path)
    assert store.update_item(LEASE_REQUESTS, "1", {"status": "approved"}) == {"id": 1, "status": "approved"}
    assert store.update_item(LEASE_REQUESTS, 99, {"status": "approved"}) is None
    assert LocalStore(path).get_list(LEASE_REQUESTS) == [{"id": 1, "status": "approved"}]

    store.remove(LEASE_REQUESTS)
    assert store.get_list(LEASE_REQUESTS) == []


def test_local_store_tolerates_corrupt_file(tmp_path) -> None:
    path = tmp_path / "store.json"
    path.write_text("{not json", encoding="utf-8")
    assert LocalStore(path).get_list(LEASE_REQUESTS) == []


def test_get_logger_uses_configured_level_and_configures_once(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "LOG_LEVEL", "warning")

    first = get_logger("leaseright.tests.level")
    again = get_logger("leaseright.tests.level")

    assert first is again
    assert first.level == logging.WARNING
    assert len(first.handlers) == 2
    assert all(handler.level == logging.WARNING for handler in first.handlers)
    assert first.propagate is False
