"""
Records and request options for the appointments and subscription endpoints.

Records are frozen pydantic models validated by `decode.parse_record`;
attribute names are snake_case, the JSON key is the field alias. Extra keys
are ignored, missing keys and JSON nulls fall back to the field default.
Arrays decode to tuples.

Options are frozen dataclasses whose `PARAMS` tuple fixes the wire order
of query/form parameters. Every option defaults to None (unset).
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .params import FilterSet, Kind, Param


class Record(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        # ids occasionally arrive as bare numbers
        coerce_numbers_to_str=True,
        allow_inf_nan=False,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

# GET /appointments/{appointmentid}
class Appointment(Record):
    appointment_id: str = Field("", alias="appointmentid")
    appointment_status: str = Field("", alias="appointmentstatus")
    appointment_type: str = Field("", alias="appointmenttype")
    appointment_type_id: str = Field("", alias="appointmenttypeid")
    charge_entry_not_required: bool = Field(False, alias="chargeentrynotrequired")
    date: str = Field("", alias="date")                 # MM/DD/YYYY
    department_id: str = Field("", alias="departmentid")
    duration: int = Field(0, alias="duration")          # minutes
    encounter_id: str = Field("", alias="encounterid")
    patient_appointment_type_name: str = Field("", alias="patientappointmenttypename")
    provider_id: str = Field("", alias="providerid")
    start_time: str = Field("", alias="starttime")      # HH:MM


class SelectListOption(Record):
    option_value: str = Field("", alias="optionvalue")
    option_id: int = Field(0, alias="optionid")

# GET /appointments/customfields
class AppointmentCustomField(Record):
    case_sensitive: bool = Field(False, alias="casesensitive")
    custom_field_id: int = Field(0, alias="customfieldid")
    disallow_update: bool = Field(False, alias="disallowupdate")
    name: str = Field("", alias="name")
    searchable: bool = Field(False, alias="searchable")
    select: bool = Field(False, alias="select")
    type: str = Field("", alias="type")
    select_list: Tuple[SelectListOption, ...] = Field((), alias="selectlist")


class AppointmentCopay(Record):
    collected_for_other: int = Field(0, alias="collectedforother")
    collected_for_appointment: int = Field(0, alias="collectedforappointment")
    insurance_copay: float = Field(0.0, alias="insurancecopay")


class AppointmentNoteSummary(Record):
    display_on_schedule: bool = Field(False, alias="displayonschedule")
    text: str = Field("", alias="text")
    id: int = Field(0, alias="id")

# GET /appointments/booked, /appointments/changed
class BookedAppointment(Record):
    appointment_id: str = Field("", alias="appointmentid")
    appointment_copay: AppointmentCopay = Field(default_factory=AppointmentCopay, alias="appointmentcopay")
    appointment_notes: Tuple[AppointmentNoteSummary, ...] = Field((), alias="appointmentnotes")
    appointment_status: str = Field("", alias="appointmentstatus")
    appointment_type: str = Field("", alias="appointmenttype")
    appointment_type_id: str = Field("", alias="appointmenttypeid")
    cancelled_by: str = Field("", alias="cancelledby")
    cancelled_datetime: str = Field("", alias="cancelleddatetime")
    cancel_reason_id: str = Field("", alias="cancelreasonid")
    cancel_reason_name: str = Field("", alias="cancelreasonname")
    cancel_reason_no_show: bool = Field(False, alias="cancelreasonnoshow")
    cancel_reason_slot_available: bool = Field(False, alias="cancelreasonslotavailable")
    charge_entry_not_required: bool = Field(False, alias="chargeentrynotrequired")
    coordinator_enterprise: bool = Field(False, alias="coordinatorenterprise")
    copay: float = Field(0.0, alias="copay")
    date: str = Field("", alias="date")
    department_id: str = Field("", alias="departmentid")
    duration: int = Field(0, alias="duration")
    encounter_id: str = Field("", alias="encounterid")
    hl7_provider_id: int = Field(0, alias="hl7providerid")
    last_modified: str = Field("", alias="lastmodified")
    last_modified_by: str = Field("", alias="lastmodifiedby")
    patient_appointment_type_name: str = Field("", alias="patientappointmenttypename")
    patient_id: str = Field("", alias="patientid")
    provider_id: str = Field("", alias="providerid")
    scheduled_by: str = Field("", alias="scheduledby")
    scheduled_datetime: str = Field("", alias="scheduleddatetime")
    start_time: str = Field("", alias="starttime")
    template_appointment_id: str = Field("", alias="templateappointmentid")
    template_appointment_type_id: str = Field("", alias="templateappointmenttypeid")

# GET /appointments/{appointmentid}/notes
class AppointmentNote(Record):
    created: str = Field("", alias="created")
    created_by: str = Field("", alias="createdby")
    display_on_schedule: bool = Field(False, alias="displayonschedule")
    note_id: str = Field("", alias="noteid")
    note_text: str = Field("", alias="notetext")


class SubscriptionEvent(Record):
    event_name: str = Field("", alias="eventname")

# GET /{feedtype}/changed/subscription
class Subscription(Record):
    status: str = Field("", alias="status")
    subscriptions: Tuple[SubscriptionEvent, ...] = Field((), alias="subscriptions")


# ---------------- options ----------------

@dataclass(frozen=True)
class PaginationOptions(FilterSet):
    limit: Optional[int] = None
    offset: Optional[int] = None

    PARAMS = (
        Param("limit", "limit", Kind.COUNT),
        Param("offset", "offset", Kind.COUNT),
    )


@dataclass(frozen=True)
class ListBookedAppointmentsOptions(FilterSet):
    department_id: Optional[str] = None
    end_date: Optional[date] = None
    patient_id: Optional[str] = None
    provider_id: Optional[str] = None
    start_date: Optional[date] = None
    appointment_status: Optional[str] = None
    pagination: Optional[PaginationOptions] = None

    PARAMS = (
        Param("providerid", "provider_id"),
        Param("departmentid", "department_id"),
        Param("patientid", "patient_id"),
        Param("startdate", "start_date", Kind.DATE),
        Param("enddate", "end_date", Kind.DATE),
        Param("appointmentstatus", "appointment_status"),
        Param("pagination", "pagination", Kind.NESTED),
    )


@dataclass(frozen=True)
class ListChangedAppointmentsOptions(FilterSet):
    department_id: Optional[str] = None
    leave_unprocessed: Optional[bool] = None
    patient_id: Optional[str] = None
    provider_id: Optional[str] = None
    show_patient_detail: Optional[bool] = None
    show_processed_end_datetime: Optional[datetime] = None
    show_processed_start_datetime: Optional[datetime] = None

    PARAMS = (
        Param("providerid", "provider_id"),
        Param("departmentid", "department_id"),
        Param("patientid", "patient_id"),
        Param("showpatientdetail", "show_patient_detail", Kind.FLAG),
        Param("showprocessedenddatetime", "show_processed_end_datetime", Kind.DATETIME),
        Param("showprocessedstartdatetime", "show_processed_start_datetime", Kind.DATETIME),
        Param("leaveunprocessed", "leave_unprocessed", Kind.FLAG),
    )


@dataclass(frozen=True)
class CreateAppointmentNoteOptions(FilterSet):
    appointment_id: Optional[str] = None
    display_on_schedule: Optional[bool] = None
    note_text: Optional[str] = None

    PARAMS = (
        Param("appointmentid", "appointment_id"),
        Param("displayonschedule", "display_on_schedule", Kind.FLAG),
        Param("notetext", "note_text"),
    )


@dataclass(frozen=True)
class ListAppointmentNotesOptions(FilterSet):
    appointment_id: Optional[str] = None
    show_deleted: Optional[bool] = None

    PARAMS = (
        Param("appointmentid", "appointment_id"),
        Param("showdeleted", "show_deleted", Kind.FLAG),
    )


@dataclass(frozen=True)
class UpdateAppointmentNoteOptions(FilterSet):
    appointment_id: Optional[str] = None
    display_on_schedule: Optional[bool] = None
    note_id: Optional[str] = None
    note_text: Optional[str] = None

    PARAMS = (
        Param("appointmentid", "appointment_id"),
        Param("displayonschedule", "display_on_schedule", Kind.FLAG),
        Param("noteid", "note_id"),
        Param("notetext", "note_text"),
    )


@dataclass(frozen=True)
class DeleteAppointmentNoteOptions(FilterSet):
    appointment_id: Optional[str] = None
    note_id: Optional[str] = None

    PARAMS = (
        Param("appointmentid", "appointment_id"),
        Param("noteid", "note_id"),
    )


@dataclass(frozen=True)
class SubscriptionOptions(FilterSet):
    # no event name subscribes/unsubscribes every event of the feed
    event_name: Optional[str] = None

    PARAMS = (Param("eventname", "event_name"),)
