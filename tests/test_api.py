from datetime import date, datetime, timezone

import httpx
import pytest

from athena_client.api import AthenaAPI
from athena_client.errors import ApiDecodeError, ApiStatusError, EmptyResultError
from athena_client.models import (
    CreateAppointmentNoteOptions,
    DeleteAppointmentNoteOptions,
    ListAppointmentNotesOptions,
    ListBookedAppointmentsOptions,
    ListChangedAppointmentsOptions,
    PaginationOptions,
    SubscriptionOptions,
    UpdateAppointmentNoteOptions,
)
from athena_client.pagination import PageCursor

def booked(_id):
    return {"appointmentid": _id, "appointmentstatus": "f", "date": "06/01/2020", "duration": 15}

def serve(payload, status=200, seen=None):
    """Handler answering every request with `payload`; requests are appended to `seen`."""
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if payload is None:
            return httpx.Response(status)
        return httpx.Response(status, json=payload)
    return handler

@pytest.mark.asyncio
async def test_get_appointment(make_http):
    seen = []
    async with make_http(serve([{"appointmentid": "1", "duration": 15}], seen=seen)) as http:
        appt = await AthenaAPI(http).get_appointment("1")
    assert appt.appointment_id == "1"
    assert appt.duration == 15
    assert seen[0].url.path == "/v1/195900/appointments/1"

@pytest.mark.asyncio
async def test_get_appointment_empty_array_is_empty_result(make_http):
    async with make_http(serve([])) as http:
        with pytest.raises(EmptyResultError):
            await AthenaAPI(http).get_appointment("1")

@pytest.mark.asyncio
async def test_get_appointment_404_stays_status_error(make_http):
    async with make_http(serve({"error": "not found"}, status=404)) as http:
        with pytest.raises(ApiStatusError) as ei:
            await AthenaAPI(http).get_appointment("1")
    assert ei.value.http_status == 404

@pytest.mark.asyncio
async def test_list_appointment_custom_fields(make_http):
    payload = {"appointmentcustomfields": [{"customfieldid": 1, "name": "a"}, {"customfieldid": 2, "name": "b"}],
               "totalcount": 2}
    async with make_http(serve(payload)) as http:
        fields = await AthenaAPI(http).list_appointment_custom_fields()
    assert [f.custom_field_id for f in fields] == [1, 2]

@pytest.mark.asyncio
async def test_list_booked_appointments(make_http):
    seen = []
    payload = {
        "appointments": [booked("1"), booked("2")],
        "next": "/v1/195900/appointments/booked?offset=30",
        "previous": "/v1/195900/appointments/booked?offset=10",
        "totalcount": 2,
    }
    opts = ListBookedAppointmentsOptions(
        provider_id="1",
        start_date=date(2020, 6, 1),
        end_date=date(2020, 6, 3),
        appointment_status="x",
    )
    async with make_http(serve(payload, seen=seen)) as http:
        page = await AthenaAPI(http).list_booked_appointments(opts)

    params = seen[0].url.params
    assert params["providerid"] == "1"
    assert params["startdate"] == "06/01/2020"
    assert params["enddate"] == "06/03/2020"
    assert params["appointmentstatus"] == "x"
    assert "departmentid" not in params and "limit" not in params

    assert len(page.items) == 2
    assert page.pagination == PageCursor(next_offset=30, previous_offset=10, total_count=2)

@pytest.mark.asyncio
async def test_list_booked_appointments_sends_pagination(make_http):
    seen = []
    async with make_http(serve({"appointments": []}, seen=seen)) as http:
        page = await AthenaAPI(http).list_booked_appointments(
            ListBookedAppointmentsOptions(pagination=PaginationOptions(limit=10, offset=20))
        )
    assert seen[0].url.params.multi_items() == [("limit", "10"), ("offset", "20")]
    assert page.pagination is None

@pytest.mark.asyncio
async def test_list_changed_appointments(make_http):
    seen = []
    opts = ListChangedAppointmentsOptions(
        provider_id="1",
        show_processed_start_datetime=datetime(2020, 6, 1, 15, 30, 45, tzinfo=timezone.utc),
        show_processed_end_datetime=datetime(2020, 6, 2, 12, 30, 45, tzinfo=timezone.utc),
    )
    async with make_http(serve({"appointments": [booked("1"), booked("2")]}, seen=seen)) as http:
        appts = await AthenaAPI(http).list_changed_appointments(opts)
    params = seen[0].url.params
    assert params["providerid"] == "1"
    assert params["showprocessedstartdatetime"] == "06/01/2020 15:30:45"
    assert params["showprocessedenddatetime"] == "06/02/2020 12:30:45"
    assert "leaveunprocessed" not in params
    assert len(appts) == 2

@pytest.mark.asyncio
async def test_create_appointment_note(make_http):
    seen = []
    async with make_http(serve({"success": "true"}, seen=seen)) as http:
        res = await AthenaAPI(http).create_appointment_note(
            "1", CreateAppointmentNoteOptions(appointment_id="1", note_text="test note")
        )
    req = seen[0]
    assert req.method == "POST"
    assert req.url.path == "/v1/195900/appointments/1/notes"
    assert "notetext=test+note" in req.content.decode()
    assert "displayonschedule" not in req.content.decode()
    assert res == {"success": "true"}

@pytest.mark.asyncio
async def test_list_appointment_notes(make_http):
    seen = []
    payload = {"notes": [{"noteid": "1", "notetext": "a"}, {"noteid": "2", "notetext": "b",
                                                           "displayonschedule": True}]}
    async with make_http(serve(payload, seen=seen)) as http:
        notes = await AthenaAPI(http).list_appointment_notes("1", ListAppointmentNotesOptions(appointment_id="1"))
    assert seen[0].url.params["appointmentid"] == "1"
    assert "showdeleted" not in seen[0].url.params
    assert len(notes) == 2
    assert notes[1].display_on_schedule is True

@pytest.mark.asyncio
async def test_update_appointment_note(make_http):
    seen = []
    async with make_http(serve(None, seen=seen)) as http:
        res = await AthenaAPI(http).update_appointment_note(
            "1", "2", UpdateAppointmentNoteOptions(appointment_id="1", note_id="2", note_text="test note")
        )
    req = seen[0]
    assert req.method == "PUT"
    assert req.url.path == "/v1/195900/appointments/1/notes/2"
    body = req.content.decode()
    assert "notetext=test+note" in body
    assert "noteid=2" in body
    assert res is None

@pytest.mark.asyncio
async def test_delete_appointment_note(make_http):
    seen = []
    async with make_http(serve(None, seen=seen)) as http:
        await AthenaAPI(http).delete_appointment_note(
            "1", "1", DeleteAppointmentNoteOptions(appointment_id="1", note_id="1")
        )
    assert seen[0].method == "DELETE"
    assert seen[0].content == b"appointmentid=1&noteid=1"

@pytest.mark.asyncio
async def test_get_subscription(make_http):
    seen = []
    payload = {"status": "ACTIVE", "subscriptions": [{"eventname": "ScheduleAppointment"}]}
    async with make_http(serve(payload, seen=seen)) as http:
        sub = await AthenaAPI(http).get_subscription("appointments")
    assert seen[0].url.path == "/v1/195900/appointments/changed/subscription"
    assert sub.status == "ACTIVE"
    assert [e.event_name for e in sub.subscriptions] == ["ScheduleAppointment"]

@pytest.mark.asyncio
async def test_get_subscription_rejects_array(make_http):
    async with make_http(serve([{"status": "ACTIVE"}])) as http:
        with pytest.raises(ApiDecodeError):
            await AthenaAPI(http).get_subscription("appointments")

@pytest.mark.asyncio
async def test_list_subscription_events(make_http):
    seen = []
    payload = {"subscriptions": [{"eventname": "ScheduleAppointment"}, {"eventname": "CancelAppointment"}]}
    async with make_http(serve(payload, seen=seen)) as http:
        events = await AthenaAPI(http).list_subscription_events("appointments")
    assert seen[0].url.path == "/v1/195900/appointments/changed/subscription/events"
    assert len(events) == 2

@pytest.mark.asyncio
async def test_subscribe_and_unsubscribe(make_http):
    seen = []
    async with make_http(serve({"success": "true"}, seen=seen)) as http:
        api = AthenaAPI(http)
        await api.subscribe("appointments", SubscriptionOptions(event_name="ScheduleAppointment"))
        await api.unsubscribe("appointments", SubscriptionOptions(event_name="ScheduleAppointment"))
        await api.subscribe("appointments")
    assert [r.method for r in seen] == ["POST", "DELETE", "POST"]
    assert seen[0].content == b"eventname=ScheduleAppointment"
    assert seen[1].content == b"eventname=ScheduleAppointment"
    assert seen[2].content == b""
