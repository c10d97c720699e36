"""
Async resource operations for the athenahealth appointments API.

Each method is one request: build params -> HttpClient.request -> decode.
Endpoints (all under /v1/{practiceid}):
- GET    /appointments/{appointmentid}                       (`get_appointment`)
- GET    /appointments/customfields                          (`list_appointment_custom_fields`)
- GET    /appointments/booked                                (`list_booked_appointments`)
- GET    /appointments/changed                               (`list_changed_appointments`)
- POST   /appointments/{appointmentid}/notes                 (`create_appointment_note`)
- GET    /appointments/{appointmentid}/notes                 (`list_appointment_notes`)
- PUT    /appointments/{appointmentid}/notes/{noteid}        (`update_appointment_note`)
- DELETE /appointments/{appointmentid}/notes/{noteid}        (`delete_appointment_note`)
- GET    /{feedtype}/changed/subscription                    (`get_subscription`)
- GET    /{feedtype}/changed/subscription/events             (`list_subscription_events`)
- POST   /{feedtype}/changed/subscription                    (`subscribe`)
- DELETE /{feedtype}/changed/subscription                    (`unsubscribe`)
"""
from __future__ import annotations
from typing import Any, Optional, Tuple

from .decode import BareArray, Envelope, Page, SingleObject, decode
from .http_client import HttpClient
from .models import (
    Appointment,
    AppointmentCustomField,
    AppointmentNote,
    BookedAppointment,
    CreateAppointmentNoteOptions,
    DeleteAppointmentNoteOptions,
    ListAppointmentNotesOptions,
    ListBookedAppointmentsOptions,
    ListChangedAppointmentsOptions,
    Subscription,
    SubscriptionEvent,
    SubscriptionOptions,
    UpdateAppointmentNoteOptions,
)
from .params import build_form, build_params

APPOINTMENT = "/appointments/{appointmentid}"
CUSTOM_FIELDS = "/appointments/customfields"
BOOKED = "/appointments/booked"
CHANGED = "/appointments/changed"
NOTES = "/appointments/{appointmentid}/notes"
NOTE = "/appointments/{appointmentid}/notes/{noteid}"
SUBSCRIPTION = "/{feedtype}/changed/subscription"
SUBSCRIPTION_EVENTS = "/{feedtype}/changed/subscription/events"


class AthenaAPI:

    def __init__(self, http: HttpClient):
        self.http = http

    async def get_appointment(self, appointment_id: str) -> Appointment:
        """Raises EmptyResultError when the API answers 200 with `[]`."""
        resp = await self.http.get(APPOINTMENT, {"appointmentid": appointment_id})
        return decode(resp.payload, BareArray(Appointment, single=True))

    async def list_appointment_custom_fields(self) -> Tuple[AppointmentCustomField, ...]:
        resp = await self.http.get(CUSTOM_FIELDS)
        return decode(resp.payload, Envelope(AppointmentCustomField, "appointmentcustomfields")).items

    async def list_booked_appointments(
        self, opts: Optional[ListBookedAppointmentsOptions] = None
    ) -> Page[BookedAppointment]:
        resp = await self.http.get(BOOKED, query=build_params(opts))
        return decode(resp.payload, Envelope(BookedAppointment, "appointments"))

    async def list_changed_appointments(
        self, opts: Optional[ListChangedAppointmentsOptions] = None
    ) -> Tuple[BookedAppointment, ...]:
        resp = await self.http.get(CHANGED, query=build_params(opts))
        return decode(resp.payload, Envelope(BookedAppointment, "appointments")).items

    async def create_appointment_note(
        self, appointment_id: str, opts: Optional[CreateAppointmentNoteOptions] = None
    ) -> Any:
        resp = await self.http.post_form(NOTES, {"appointmentid": appointment_id}, build_form(opts))
        return resp.payload

    async def list_appointment_notes(
        self, appointment_id: str, opts: Optional[ListAppointmentNotesOptions] = None
    ) -> Tuple[AppointmentNote, ...]:
        resp = await self.http.get(NOTES, {"appointmentid": appointment_id}, build_params(opts))
        return decode(resp.payload, Envelope(AppointmentNote, "notes")).items

    async def update_appointment_note(
        self, appointment_id: str, note_id: str, opts: Optional[UpdateAppointmentNoteOptions] = None
    ) -> Any:
        resp = await self.http.put_form(
            NOTE, {"appointmentid": appointment_id, "noteid": note_id}, build_form(opts)
        )
        return resp.payload

    async def delete_appointment_note(
        self, appointment_id: str, note_id: str, opts: Optional[DeleteAppointmentNoteOptions] = None
    ) -> Any:
        resp = await self.http.delete_form(
            NOTE, {"appointmentid": appointment_id, "noteid": note_id}, build_form(opts)
        )
        return resp.payload

    async def get_subscription(self, feed_type: str) -> Subscription:
        resp = await self.http.get(SUBSCRIPTION, {"feedtype": feed_type})
        return decode(resp.payload, SingleObject(Subscription))

    async def list_subscription_events(self, feed_type: str) -> Tuple[SubscriptionEvent, ...]:
        resp = await self.http.get(SUBSCRIPTION_EVENTS, {"feedtype": feed_type})
        return decode(resp.payload, Envelope(SubscriptionEvent, "subscriptions")).items

    async def subscribe(self, feed_type: str, opts: Optional[SubscriptionOptions] = None) -> Any:
        resp = await self.http.post_form(SUBSCRIPTION, {"feedtype": feed_type}, build_form(opts))
        return resp.payload

    async def unsubscribe(self, feed_type: str, opts: Optional[SubscriptionOptions] = None) -> Any:
        resp = await self.http.delete_form(SUBSCRIPTION, {"feedtype": feed_type}, build_form(opts))
        return resp.payload
