"""Tests for the response envelope (core/domain/envelope.py)."""

from __future__ import annotations

import pytest

from shuttle.core.domain.envelope import Envelope, records
from shuttle.core.errors import NotFoundError, RemoteRequestError


def test_success_carries_data() -> None:
    envelope = Envelope.success(200, {"id": "w-1"})

    assert envelope.ok
    assert envelope.status == 200
    assert envelope.data == {"id": "w-1"}
    assert envelope.error is None


def test_failure_carries_error() -> None:
    envelope = Envelope.failure(500, "boom")

    assert not envelope.ok
    assert envelope.data is None
    assert envelope.error == "boom"


def test_failure_without_message_uses_status() -> None:
    assert Envelope.failure(503, "").error == "HTTP 503"


def test_success_with_error_is_rejected() -> None:
    with pytest.raises(ValueError):
        Envelope(ok=True, status=200, error="nope")


def test_failure_with_data_is_rejected() -> None:
    with pytest.raises(ValueError):
        Envelope(ok=False, status=500, data={"x": 1}, error="nope")


def test_not_found_only_for_failed_404() -> None:
    assert Envelope.failure(404, "missing").not_found
    assert not Envelope.failure(500, "missing").not_found
    assert not Envelope.success(404, None).not_found


def test_raise_for_error_returns_data() -> None:
    assert Envelope.success(200, [1, 2]).raise_for_error() == [1, 2]


def test_raise_for_error_maps_404_to_not_found() -> None:
    with pytest.raises(NotFoundError) as excinfo:
        Envelope.failure(404, "no such item").raise_for_error(not_found="Work item not found: w-1")

    assert excinfo.value.message == "Work item not found: w-1"
    assert excinfo.value.status == 404


def test_raise_for_error_keeps_remote_message_without_override() -> None:
    with pytest.raises(NotFoundError, match="no such item"):
        Envelope.failure(404, "no such item").raise_for_error()


def test_raise_for_error_other_statuses() -> None:
    with pytest.raises(RemoteRequestError) as excinfo:
        Envelope.failure(500, "Internal error").raise_for_error(not_found="ignored")

    assert not isinstance(excinfo.value, NotFoundError)
    assert excinfo.value.status == 500
    assert excinfo.value.message == "Internal error"


class TestMapping:
    def test_object_is_returned(self) -> None:
        assert Envelope.success(200, {"agents": []}).mapping() == {"agents": []}

    def test_empty_reply_is_empty_object(self) -> None:
        assert Envelope.success(204, None).mapping() == {}

    @pytest.mark.parametrize("payload", [[{"guid": "a"}], "ok", 42, True])
    def test_other_shapes_are_a_remote_error(self, payload: object) -> None:
        with pytest.raises(RemoteRequestError) as excinfo:
            Envelope.success(200, payload).mapping()

        assert excinfo.value.message == "Unexpected response from coordinator"
        assert excinfo.value.status == 502

    def test_failure_still_raises_first(self) -> None:
        with pytest.raises(NotFoundError, match="Agent not found: g-1"):
            Envelope.failure(404, "missing").mapping(not_found="Agent not found: g-1")


class TestRecords:
    def test_list_of_objects(self) -> None:
        assert records({"agents": [{"guid": "a"}]}, "agents") == [{"guid": "a"}]

    @pytest.mark.parametrize("payload", [{}, {"agents": None}])
    def test_missing_is_empty(self, payload: dict) -> None:
        assert records(payload, "agents") == []

    @pytest.mark.parametrize("value", [{"guid": "a"}, ["a"], "agents", [{"guid": "a"}, 3]])
    def test_other_shapes_are_a_remote_error(self, value: object) -> None:
        with pytest.raises(RemoteRequestError, match="Unexpected response"):
            records({"agents": value}, "agents")
