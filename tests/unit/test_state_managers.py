"""Unit tests for the weather view-state holder."""

import asyncio

import httpx
import pytest

from city_weather.exceptions import HttpError
from city_weather.models.view_state import Failed, Idle, Loading, Success
from city_weather.models.weather import WeatherRecord
from city_weather.services.weather_service import FetchResult
from city_weather.state_managers import WeatherViewStateHolder


def record(location: str, temp: float = 70.0) -> FetchResult:
    return FetchResult(record=WeatherRecord(location=location, temp=temp))


# Initial state and no-ops


def test_initial_state_is_idle(holder):
    """Test a new holder starts idle with nothing to show."""
    assert holder.result is None
    assert holder.is_loading is False
    assert holder.error_message is None
    assert isinstance(holder.fetch_state, Idle)


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["", "   "])
async def test_fetch_by_city_empty_is_noop(holder, mock_http_client, name):
    """Test an empty city name changes nothing and makes no request."""
    published = []
    holder.subscribe(published.append)
    before = holder.state

    task = holder.fetch_by_city(name)

    assert task is None
    assert holder.state is before
    assert published == []
    mock_http_client.get.assert_not_called()


# Scenarios


@pytest.mark.asyncio
async def test_fetch_by_city_success(holder, mock_http_client, make_response, mock_weather_response):
    """Test Columbus at 72.5 ends with the record and no error."""
    mock_http_client.get.return_value = make_response(200, json=mock_weather_response)

    task = holder.fetch_by_city("Columbus")

    # Loading is published synchronously, before the request completes
    assert holder.is_loading is True
    assert isinstance(holder.fetch_state, Loading)

    await task

    assert holder.result.temp == 72.5
    assert holder.result.location == "Columbus"
    assert holder.is_loading is False
    assert holder.error_message is None
    assert isinstance(holder.fetch_state, Success)


@pytest.mark.asyncio
async def test_loading_toggles_once_per_call(holder, mock_http_client, make_response, mock_weather_response):
    """Test one fetch publishes exactly loading then done."""
    mock_http_client.get.return_value = make_response(200, json=mock_weather_response)
    published = []
    holder.subscribe(published.append)

    await holder.fetch_by_city("Columbus")

    assert [state.is_loading for state in published] == [True, False]
    assert published[0].error_message is None
    assert published[1].result is not None


@pytest.mark.asyncio
async def test_not_found_keeps_previous_result(holder, mock_http_client, make_response, mock_weather_response):
    """Test a 404 sets the error and leaves the previous result in place."""
    mock_http_client.get.return_value = make_response(200, json=mock_weather_response)
    await holder.fetch_by_city("Columbus")
    previous = holder.result

    mock_http_client.get.return_value = make_response(404, json={"cod": "404", "message": "city not found"})
    await holder.fetch_by_city("Zzzznotacity")

    assert "not found" in holder.error_message
    assert holder.result is previous
    assert holder.is_loading is False
    assert isinstance(holder.fetch_state, Failed)


@pytest.mark.asyncio
async def test_new_fetch_clears_previous_error(holder, mock_http_client, make_response, mock_weather_response):
    """Test starting a fetch clears the error, and success keeps it cleared."""
    mock_http_client.get.return_value = make_response(404, json={"cod": "404", "message": "city not found"})
    await holder.fetch_by_city("Zzzznotacity")
    assert holder.error_message is not None

    mock_http_client.get.return_value = make_response(200, json=mock_weather_response)
    task = holder.fetch_by_city("Columbus")
    assert holder.error_message is None
    assert holder.is_loading is True

    await task
    assert holder.error_message is None


@pytest.mark.asyncio
async def test_timeout_sets_error(holder, mock_http_client):
    """Test a network timeout ends with a timeout message and no loading."""
    mock_http_client.get.side_effect = httpx.ConnectTimeout("timed out")

    await holder.fetch_by_city("Columbus")

    assert "timed out" in holder.error_message
    assert holder.is_loading is False
    assert holder.result is None


@pytest.mark.asyncio
async def test_fetch_by_coordinates_success(holder, mock_http_client, make_response, mock_weather_response):
    """Test fetching by coordinates goes through the same transitions."""
    mock_http_client.get.return_value = make_response(200, json=mock_weather_response)

    await holder.fetch_by_coordinates(39.9612, -82.9988)

    assert holder.result.location == "Columbus"
    params = mock_http_client.get.call_args.kwargs["params"]
    assert params["lat"] == "39.9612"
    assert params["lon"] == "-82.9988"


@pytest.mark.asyncio
@pytest.mark.parametrize("lat,lon", [(91.0, 0.0), (-90.5, 10.0), (0.0, 180.5), (45.0, -181.0)])
async def test_out_of_range_coordinates_take_error_path(holder, mock_http_client, lat, lon):
    """Test invalid coordinates publish an error without loading or a request."""
    published = []
    holder.subscribe(published.append)

    task = holder.fetch_by_coordinates(lat, lon)

    assert task is None
    assert len(published) == 1
    assert published[0].is_loading is False
    assert "Invalid coordinates" in holder.error_message
    assert holder.result is None
    mock_http_client.get.assert_not_called()


# Overlapping fetches


@pytest.mark.asyncio
async def test_last_write_wins_when_not_discarding(controlled_client):
    """Test B answering first is overwritten by A's later answer."""
    holder = WeatherViewStateHolder(controlled_client, discard_stale_responses=False)

    task_a = holder.fetch_by_city("A")
    task_b = holder.fetch_by_city("B")
    await controlled_client.wait_for("A", "B")

    controlled_client.resolve("B", record("B"))
    await task_b
    assert holder.result.location == "B"
    assert holder.is_loading is False

    controlled_client.resolve("A", record("A"))
    await task_a
    assert holder.result.location == "A"
    assert holder.is_loading is False


@pytest.mark.asyncio
async def test_stale_response_is_discarded(controlled_client):
    """Test A's late answer is dropped once B was dispatched after it."""
    holder = WeatherViewStateHolder(controlled_client, discard_stale_responses=True)

    task_a = holder.fetch_by_city("A")
    task_b = holder.fetch_by_city("B")
    await controlled_client.wait_for("A", "B")

    controlled_client.resolve("B", record("B"))
    await task_b
    assert holder.result.location == "B"

    controlled_client.resolve("A", record("A"))
    await task_a
    assert holder.result.location == "B"
    assert holder.state.request_id == 2


@pytest.mark.asyncio
async def test_rejected_coordinates_supersede_fetch_in_flight(controlled_client):
    """Test a late answer does not overwrite the error from rejected coordinates."""
    holder = WeatherViewStateHolder(controlled_client, discard_stale_responses=True)

    task_a = holder.fetch_by_city("A")
    await controlled_client.wait_for("A")

    assert holder.fetch_by_coordinates(95.0, 0.0) is None
    assert holder.state.request_id == 2
    assert "Invalid coordinates" in holder.error_message

    controlled_client.resolve("A", record("A"))
    await task_a

    assert holder.result is None
    assert "Invalid coordinates" in holder.error_message
    assert holder.state.request_id == 2


@pytest.mark.asyncio
async def test_stale_response_keeps_loading_until_latest_arrives(controlled_client):
    """Test an older answer arriving first does not end the loading state."""
    holder = WeatherViewStateHolder(controlled_client, discard_stale_responses=True)

    task_a = holder.fetch_by_city("A")
    task_b = holder.fetch_by_city("B")
    await controlled_client.wait_for("A", "B")

    controlled_client.resolve("A", FetchResult(error=HttpError("Weather not found for city 'A'", 404)))
    await task_a
    assert holder.is_loading is True
    assert holder.error_message is None

    controlled_client.resolve("B", record("B"))
    await task_b
    assert holder.is_loading is False
    assert holder.result.location == "B"


@pytest.mark.asyncio
async def test_wait_idle(controlled_client):
    """Test wait_idle returns once all fetches are done."""
    holder = WeatherViewStateHolder(controlled_client)
    holder.fetch_by_city("A")
    await controlled_client.wait_for("A")
    assert holder.in_flight == 1

    controlled_client.resolve("A", record("A"))
    await holder.wait_idle()

    assert holder.in_flight == 0
    assert holder.result.location == "A"


# Subscriptions and lifecycle


@pytest.mark.asyncio
async def test_unsubscribe_stops_updates(holder, mock_http_client, make_response, mock_weather_response):
    """Test an unsubscribed listener receives nothing further."""
    mock_http_client.get.return_value = make_response(200, json=mock_weather_response)
    published = []
    unsubscribe = holder.subscribe(published.append)
    unsubscribe()

    await holder.fetch_by_city("Columbus")

    assert published == []


@pytest.mark.asyncio
async def test_failing_listener_does_not_break_holder(holder, mock_http_client, make_response, mock_weather_response):
    """Test a listener raising does not stop other listeners or the fetch."""
    mock_http_client.get.return_value = make_response(200, json=mock_weather_response)

    def broken(state):
        raise RuntimeError("listener bug")

    published = []
    holder.subscribe(broken)
    holder.subscribe(published.append)

    await holder.fetch_by_city("Columbus")

    assert len(published) == 2
    assert holder.result.location == "Columbus"


@pytest.mark.asyncio
async def test_cleanup_cancels_in_flight(controlled_client):
    """Test cleanup cancels pending fetches."""
    holder = WeatherViewStateHolder(controlled_client)
    await holder.initialize()
    task = holder.fetch_by_city("A")
    await controlled_client.wait_for("A")

    await holder.cleanup()

    assert task.cancelled()
    assert holder.in_flight == 0


@pytest.mark.asyncio
async def test_concurrent_commands_are_independent(holder, mock_http_client, make_response, mock_weather_response):
    """Test many overlapping commands all complete without leaving loading set."""
    mock_http_client.get.return_value = make_response(200, json=mock_weather_response)

    tasks = [holder.fetch_by_city(f"City {i}") for i in range(5)]
    await asyncio.gather(*tasks)

    assert mock_http_client.get.call_count == 5
    assert holder.is_loading is False
    assert holder.state.request_id == 5
