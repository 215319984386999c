import hashlib
import json

import httpx
import pytest
import respx

from nightscout_client import (
    DecodeError,
    NightscoutClient,
    NotFoundError,
    QueryValidationError,
)
from nightscout_models import DeviceStatus, SgvEntry, Treatment, Trend

BASE_URL = "https://ns.example.com"
HOST = "ns.example.com"


def _sgv(sgv=120, device="xDrip", direction="Flat", **extra):
    doc = {
        "_id": f"id-{sgv}",
        "sgv": sgv,
        "date": 1698400800000,
        "dateString": "2023-10-27T10:00:00.000Z",
        "direction": direction,
        "type": "sgv",
        "device": device,
    }
    doc.update(extra)
    return doc


@pytest.mark.asyncio
@respx.mock
async def test_fetch_sgv_sends_limit_device_and_secret_header():
    route = respx.get(f"{BASE_URL}/api/v2/entries/sgv.json").mock(
        return_value=httpx.Response(200, json=[_sgv(120), _sgv(118, direction="FortyFiveDown")])
    )
    client = NightscoutClient(BASE_URL, api_secret="abc123")

    entries = await client.sgv().limit(5).device("xdrip").fetch()

    assert route.call_count == 1
    request = route.calls.last.request
    assert request.url.params.get_list("count") == ["5"]
    assert request.url.params.get_list("find[device]") == ["xdrip"]
    assert request.headers["api-secret"] == hashlib.sha1(b"abc123").hexdigest()
    assert "authorization" not in request.headers
    assert [entry.sgv for entry in entries] == [120, 118]
    assert entries[1].direction is Trend.FORTY_FIVE_DOWN


@pytest.mark.asyncio
@respx.mock
async def test_token_client_sends_bearer_header():
    route = respx.get(f"{BASE_URL}/api/v2/treatments.json").mock(return_value=httpx.Response(200, json=[]))
    client = NightscoutClient(BASE_URL, token="reader-abc")

    await client.treatments().fetch()

    request = route.calls.last.request
    assert request.headers["authorization"] == "Bearer reader-abc"
    assert "api-secret" not in request.headers


@pytest.mark.asyncio
@respx.mock
async def test_trailing_slash_gives_identical_request_urls():
    route = respx.get(f"{BASE_URL}/api/v2/entries/sgv.json").mock(return_value=httpx.Response(200, json=[]))

    await NightscoutClient(BASE_URL).sgv().limit(1).fetch()
    await NightscoutClient(f"{BASE_URL}/").sgv().limit(1).fetch()

    first, second = (call.request.url for call in route.calls)
    assert str(first) == str(second)
    assert first.raw_path == b"/api/v2/entries/sgv.json?count=1"


@pytest.mark.asyncio
@respx.mock(assert_all_called=False)
async def test_invalid_limit_fails_before_any_request():
    route = respx.get(f"{BASE_URL}/api/v2/entries/sgv.json").mock(return_value=httpx.Response(200, json=[]))

    with pytest.raises(QueryValidationError):
        await NightscoutClient(BASE_URL).sgv().limit(0).fetch()

    assert not route.called
    assert respx.calls.call_count == 0


@pytest.mark.asyncio
@respx.mock
async def test_entry_without_trend_decodes_to_absent_direction():
    doc = _sgv(95)
    del doc["direction"]
    respx.get(f"{BASE_URL}/api/v2/entries/sgv.json").mock(return_value=httpx.Response(200, json=[doc]))

    entries = await NightscoutClient(BASE_URL).sgv().fetch()

    assert entries[0].direction is None


@pytest.mark.asyncio
@respx.mock
async def test_one_malformed_entry_fails_whole_list():
    bad = _sgv(100)
    del bad["sgv"]
    respx.get(f"{BASE_URL}/api/v2/entries/sgv.json").mock(
        return_value=httpx.Response(200, json=[_sgv(120), bad, _sgv(130)])
    )

    with pytest.raises(DecodeError) as excinfo:
        await NightscoutClient(BASE_URL).sgv().fetch()

    assert "sgv" in str(excinfo.value)
    assert excinfo.value.endpoint == "api/v2/entries/sgv.json"


@pytest.mark.asyncio
@respx.mock
async def test_latest_uses_count_one():
    route = respx.get(f"{BASE_URL}/api/v2/entries/sgv.json").mock(
        return_value=httpx.Response(200, json=[_sgv(142)])
    )

    entry = await NightscoutClient(BASE_URL).sgv().limit(50).latest()

    assert entry.sgv == 142
    assert route.calls.last.request.url.params.get_list("count") == ["1"]


@pytest.mark.asyncio
@respx.mock
async def test_latest_raises_when_empty():
    respx.get(f"{BASE_URL}/api/v2/entries/mbg.json").mock(return_value=httpx.Response(200, json=[]))

    with pytest.raises(NotFoundError):
        await NightscoutClient(BASE_URL).mbg().latest()


@pytest.mark.asyncio
@respx.mock
async def test_create_treatments_posts_array_for_single_item():
    echoed = {
        "_id": "t-1",
        "eventType": "Carb Correction",
        "created_at": "2023-10-27T15:00:00+00:00",
        "carbs": 15.0,
        "enteredBy": "nightscout-client",
    }
    route = respx.post(f"{BASE_URL}/api/v2/treatments.json").mock(return_value=httpx.Response(200, json=[echoed]))
    client = NightscoutClient(BASE_URL, api_secret="abc123")
    snack = Treatment(
        event_type="Carb Correction",
        created_at="2023-10-27T15:00:00+00:00",
        carbs=15.0,
        entered_by="nightscout-client",
    )

    created = await client.create_treatments([snack])

    request = route.calls.last.request
    assert request.headers["content-type"] == "application/json"
    body = json.loads(request.content)
    assert body == [
        {
            "eventType": "Carb Correction",
            "created_at": "2023-10-27T15:00:00+00:00",
            "carbs": 15.0,
            "enteredBy": "nightscout-client",
        }
    ]
    assert created[0].id == "t-1"
    assert created[0].carbs == 15.0


@pytest.mark.asyncio
@respx.mock
async def test_create_returns_submitted_items_on_plain_acknowledgement():
    respx.post(f"{BASE_URL}/api/v2/treatments.json").mock(return_value=httpx.Response(200, json={"ok": 1}))
    treatment = Treatment(event_type="Note", created_at="2023-10-27T15:00:00+00:00", notes="site change")

    created = await NightscoutClient(BASE_URL, token="writer").create_treatments([treatment])

    assert created == [treatment]


@pytest.mark.asyncio
@respx.mock
async def test_create_sgv_entries_posts_to_entries():
    route = respx.post(f"{BASE_URL}/api/v2/entries.json").mock(return_value=httpx.Response(200, json=[]))
    entry = SgvEntry(sgv=110, date=1698400800000, date_string="2023-10-27T10:00:00.000Z", device="test")

    await NightscoutClient(BASE_URL, api_secret="abc123").create_sgv_entries([entry])

    body = json.loads(route.calls.last.request.content)
    assert body == [
        {"sgv": 110, "date": 1698400800000, "dateString": "2023-10-27T10:00:00.000Z", "device": "test", "type": "sgv"}
    ]


@pytest.mark.asyncio
@respx.mock
async def test_devicestatus_filters_and_keeps_unknown_blocks():
    route = respx.get(f"{BASE_URL}/api/v2/devicestatus.json").mock(
        return_value=httpx.Response(
            200,
            json=[
                {
                    "_id": "ds-1",
                    "device": "MyPump",
                    "created_at": "2023-10-27T10:00:00Z",
                    "pump": {"reservoir": 120.5},
                    "xdripjs": {"state": 6},
                }
            ],
        )
    )

    statuses = await NightscoutClient(BASE_URL).devicestatus().device("MyPump").fetch()

    assert route.calls.last.request.url.params.get_list("find[device]") == ["MyPump"]
    assert isinstance(statuses[0], DeviceStatus)
    assert statuses[0].pump == {"reservoir": 120.5}
    assert statuses[0].model_extra == {"xdripjs": {"state": 6}}


@pytest.mark.asyncio
@respx.mock
async def test_profiles_and_status_direct_fetch():
    respx.get(f"{BASE_URL}/api/v2/profile.json").mock(
        return_value=httpx.Response(
            200,
            json=[
                {
                    "_id": "653b6",
                    "defaultProfile": "Default",
                    "startDate": "2023-01-01T00:00:00.000Z",
                    "created_at": "2023-01-01T00:00:00.000Z",
                    "store": {
                        "Default": {
                            "dia": 3.0,
                            "timezone": "UTC",
                            "units": "mg/dl",
                            "carbratio": [{"time": "00:00", "value": 10.0}],
                            "sens": [{"time": "00:00", "value": 30.0}],
                            "basal": [{"time": "00:00", "value": 1.5, "timeAsSeconds": 0}],
                            "target_low": [{"time": "00:00", "value": 80.0}],
                            "target_high": [{"time": "00:00", "value": 120.0}],
                        }
                    },
                }
            ],
        )
    )
    respx.get(f"{BASE_URL}/api/v2/status.json").mock(
        return_value=httpx.Response(
            200,
            json={
                "status": "ok",
                "name": "nightscout",
                "version": "15.0.2",
                "serverTime": "2023-10-27T10:00:00.000Z",
                "serverTimeEpoch": 1698400800000,
                "apiEnabled": True,
                "careportalEnabled": True,
                "boluscalcEnabled": False,
                "settings": {"units": "mg/dl"},
            },
        )
    )
    client = NightscoutClient(BASE_URL)

    profiles = await client.profiles()
    status = await client.status()

    assert profiles[0].default_profile == "Default"
    assert profiles[0].active.basal[0].value == 1.5
    assert status.version == "15.0.2"
    assert status.boluscalc_enabled is False


@pytest.mark.asyncio
@respx.mock
async def test_by_id_appends_id_to_path_and_sends_no_filters():
    route = respx.get(f"{BASE_URL}/api/v2/entries/sgv.json/id-120").mock(
        return_value=httpx.Response(200, json=[_sgv(120)])
    )

    entries = await NightscoutClient(BASE_URL).sgv().limit(5).device("xdrip").by_id("id-120").fetch()

    request = route.calls.last.request
    assert request.url.path == "/api/v2/entries/sgv.json/id-120"
    assert not request.url.params
    assert entries[0].id == "id-120"


@pytest.mark.asyncio
@respx.mock
async def test_with_secret_and_with_token_return_reauthenticated_copies():
    route = respx.get(f"{BASE_URL}/api/v2/treatments.json").mock(return_value=httpx.Response(200, json=[]))
    anonymous = NightscoutClient(f"{BASE_URL}/")

    with_secret = anonymous.with_secret("abc123")
    with_token = with_secret.with_token("reader-abc")

    await anonymous.treatments().fetch()
    await with_secret.treatments().fetch()
    await with_token.treatments().fetch()

    first, second, third = (call.request for call in route.calls)
    assert "api-secret" not in first.headers and "authorization" not in first.headers
    assert second.headers["api-secret"] == hashlib.sha1(b"abc123").hexdigest()
    assert "authorization" not in second.headers
    assert third.headers["authorization"] == "Bearer reader-abc"
    assert "api-secret" not in third.headers
    assert with_token.base_url == anonymous.base_url == BASE_URL
    assert anonymous.credentials.scheme.value == "none"
