import pytest
import requests
from unittest.mock import MagicMock
from crowdsense.common.exceptions import DataSourceError
from crowdsense.crowd.infrastructure.weather import OpenMeteoWeatherClient


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def response(payload):
    resp = MagicMock()
    resp.json.return_value = payload
    resp.raise_for_status.return_value = None
    return resp


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session():
    session = MagicMock()
    session.get.return_value = response({"current": {"weather_code": 61}})
    return session


@pytest.fixture
def client(session, clock):
    return OpenMeteoWeatherClient(session=session, clock=clock, cache_ttl=600)


def test_current_code(client, session):
    assert client.current_code("Ooty") == 61
    _, kwargs = session.get.call_args
    assert kwargs["params"]["current"] == "weather_code"
    assert kwargs["params"]["latitude"] == pytest.approx(11.4102)


def test_results_are_cached_per_region(client, session, clock):
    client.current_code("Ooty")
    clock.now += 599
    client.current_code("Ooty")
    assert session.get.call_count == 1

    client.current_code("Coonoor")
    assert session.get.call_count == 2


def test_cache_expires(client, session, clock):
    client.current_code("Ooty")
    clock.now += 601
    session.get.return_value = response({"current": {"weather_code": 2}})
    assert client.current_code("Ooty") == 2
    assert session.get.call_count == 2


def test_unknown_region(client, session):
    with pytest.raises(DataSourceError):
        client.current_code("Atlantis")
    session.get.assert_not_called()


def test_request_failure(client, session):
    session.get.side_effect = requests.ConnectionError("no route to host")
    with pytest.raises(DataSourceError):
        client.current_code("Ooty")


def test_malformed_response(client, session):
    session.get.return_value = response({"hourly": {}})
    with pytest.raises(DataSourceError):
        client.current_code("Ooty")
