from __future__ import annotations

from datetime import timedelta
from unittest.mock import Mock, patch

import pytest

from eventline.client import Client
from eventline.constants import ENV_API_KEY, ENV_HOST
from eventline.errors import ClientClosedError, InvalidArgumentError
from eventline.properties import Properties

HOST = "https://ingest.test"
API_KEY = "phc_test_key"


@pytest.fixture
def client(transport, fixed_clock):
    """
    Client with a recording transport and timed flushing disabled.
    """
    c = Client(HOST, API_KEY, flush_interval=0, transport=transport, clock=fixed_clock)
    yield c
    if c.is_active:
        c.close()


def sent_events(transport) -> list:
    events = []
    for request in transport.requests:
        events.extend(request.payload.get("batch", [request.payload]))
    return events


@pytest.mark.unit
class TestCapture:
    """
    Test Client.capture.
    """

    def test_capture_is_sent_on_close(self, client, transport) -> None:
        client.capture("u1", "clicked", Properties({"button": "signup"}))
        client.close()

        assert len(transport.requests) == 1
        request = transport.requests[0]
        assert request.url == f"{HOST}/capture"
        assert request.payload == {
            "event": "clicked",
            "distinct_id": "u1",
            "timestamp": "2024-05-17T12:30:00+00:00",
            "properties": {"button": "signup"},
        }

    def test_plain_dict_properties(self, client, transport) -> None:
        client.capture("u1", "clicked", {"count": 3})
        client.close()

        assert sent_events(transport)[0]["properties"] == {"count": 3}

    def test_default_properties_are_empty(self, client, transport) -> None:
        client.capture("u1", "clicked")
        client.close()

        assert sent_events(transport)[0]["properties"] == {}

    @pytest.mark.parametrize("distinct_id", ["", "   ", None])
    def test_blank_distinct_id(self, distinct_id, client, transport) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            client.capture(distinct_id, "clicked")

        assert exc_info.value.argument == "distinct_id"
        client.close()
        assert transport.requests == []

    @pytest.mark.parametrize("event_name", ["", "\t"])
    def test_blank_event_name(self, event_name, client, transport) -> None:
        with pytest.raises(InvalidArgumentError):
            client.capture("u1", event_name)

        client.close()
        assert transport.requests == []

    def test_reserved_event_name(self, client, transport) -> None:
        with pytest.raises(InvalidArgumentError, match="reserved"):
            client.capture("u1", "$identify")

        client.close()
        assert transport.requests == []

    def test_capture_after_close(self, client) -> None:
        client.close()

        with pytest.raises(ClientClosedError):
            client.capture("u1", "clicked")

    def test_flush_requires_more_than_flush_size(self, transport, fixed_clock) -> None:
        """
        Test two captures with flush_size=2 stay buffered and a third flushes all three.
        """
        client = Client(HOST, API_KEY, flush_size=2, flush_interval=0, transport=transport, clock=fixed_clock)

        client.capture("u1", "clicked")
        client.capture("u2", "clicked")
        assert not transport.wait_for(1, timeout=0.2)

        client.capture("u3", "clicked")
        assert transport.wait_for(1)

        request = transport.requests[0]
        assert request.url == f"{HOST}/batch"
        assert [e["distinct_id"] for e in request.payload["batch"]] == ["u1", "u2", "u3"]
        client.close()
        assert len(transport.requests) == 1

    def test_timed_flush(self, transport, fixed_clock) -> None:
        client = Client(
            HOST,
            API_KEY,
            flush_interval=timedelta(milliseconds=50),
            transport=transport,
            clock=fixed_clock,
        )

        client.capture("u1", "clicked")

        assert transport.wait_for(1)
        client.close()
        assert len(transport.requests) == 1


@pytest.mark.unit
class TestIdentify:
    """
    Test Client.identify.
    """

    def test_set_only(self, client, transport) -> None:
        client.identify("u1", Properties({"plan": "pro"}))
        client.close()

        event = sent_events(transport)[0]
        assert event["event"] == "$identify"
        assert event["distinct_id"] == "u1"
        assert event["properties"] == {"$set": {"plan": "pro"}}

    def test_set_once_only(self, client, transport) -> None:
        client.identify("u1", properties_set_once=Properties({"first_seen": "2024-01-01"}))
        client.close()

        assert sent_events(transport)[0]["properties"] == {
            "$set_once": {"first_seen": "2024-01-01"}
        }

    def test_both(self, client, transport) -> None:
        client.identify("u1", {"plan": "pro"}, {"first_seen": "2024-01-01"})
        client.close()

        assert sent_events(transport)[0]["properties"] == {
            "$set": {"plan": "pro"},
            "$set_once": {"first_seen": "2024-01-01"},
        }

    def test_neither(self, client, transport) -> None:
        client.identify("u1")
        client.close()

        assert sent_events(transport)[0]["properties"] == {}

    def test_blank_distinct_id(self, client, transport) -> None:
        with pytest.raises(InvalidArgumentError):
            client.identify(" ", Properties({"plan": "pro"}))

        client.close()
        assert transport.requests == []

    def test_identify_after_close(self, client) -> None:
        client.close()

        with pytest.raises(ClientClosedError):
            client.identify("u1")


@pytest.mark.unit
class TestLifecycle:
    """
    Test construction and closing.
    """

    @pytest.mark.parametrize("flush_size", [0, -3])
    def test_non_positive_flush_size(self, flush_size, transport) -> None:
        with pytest.raises(InvalidArgumentError):
            Client(HOST, API_KEY, flush_size=flush_size, transport=transport)

    def test_close_twice(self, client, transport) -> None:
        client.capture("u1", "clicked")
        client.close()

        with pytest.raises(ClientClosedError):
            client.close()

        assert len(transport.requests) == 1

    def test_borrowed_transport_is_not_closed(self, client, transport) -> None:
        client.close()

        assert transport.closed_with is None

    @pytest.mark.parametrize("wait", [False, True])
    def test_owned_transport_is_closed(self, wait: bool) -> None:
        with patch("eventline.client.HttpxTransport") as transport_cls:
            client = Client(HOST, API_KEY, timeout=3)
            client.close(wait_for_delivery=wait)

        transport_cls.assert_called_once_with(timeout=3.0)
        transport_cls.return_value.close.assert_called_once_with(wait=wait)

    def test_context_manager(self, transport, fixed_clock) -> None:
        with Client(HOST, API_KEY, transport=transport, clock=fixed_clock) as client:
            client.capture("u1", "clicked")

        assert not client.is_active
        assert len(transport.requests) == 1

    def test_context_manager_after_explicit_close(self, transport) -> None:
        with Client(HOST, API_KEY, transport=transport) as client:
            client.close()

        assert not client.is_active

    def test_default_clock_is_utc(self, transport) -> None:
        with Client(HOST, API_KEY, transport=transport) as client:
            client.capture("u1", "clicked")

        assert sent_events(transport)[0]["timestamp"].endswith("+00:00")

    def test_from_environment(self, monkeypatch, tmp_path, transport) -> None:
        monkeypatch.setenv(ENV_HOST, "https://env.test/")
        monkeypatch.setenv(ENV_API_KEY, "env-key")

        client = Client.from_environment(transport=transport, config_path=tmp_path / "none.ini")
        client.capture("u1", "clicked")
        client.close()

        assert client.config.api_key == "env-key"
        assert transport.requests[0].url == "https://env.test/capture"
        assert transport.requests[0].headers["Authorization"] == "Bearer env-key"

    def test_from_config_uses_mock_transport(self, make_config) -> None:
        mock_transport = Mock()
        client = Client.from_config(make_config(), transport=mock_transport)
        client.capture("u1", "clicked")
        client.close()

        mock_transport.submit.assert_called_once()
        mock_transport.close.assert_not_called()
