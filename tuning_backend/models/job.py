"""
Job domain models and schemas.

Request/response schemas for job submission, editing and administration.

Dependencies: pydantic
System role: Job API contracts
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class JobOptions(BaseModel):
    """Processing options selected by the requester."""

    dpf_off: bool = False
    egr_off: bool = False
    adblue_off: bool = False
    dtc_off: bool = False
    dtc_codes: str = ""
    immo_off: bool = False


class VehicleDescriptor(BaseModel):
    """Optional vehicle and controller identification."""

    vehicle_make: str | None = None
    vehicle_model: str | None = None
    vehicle_year: int | None = Field(default=None, ge=1900, le=2100)
    ecu_controller: str | None = None

    @field_validator("vehicle_year", mode="before")
    @classmethod
    def _blank_year_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class SubmitJobRequest(VehicleDescriptor):
    """Request schema for a new job. File bytes are stored before this call."""

    original_filename: str = Field(min_length=1, max_length=255)
    stored_filename: str = Field(min_length=1, max_length=255)
    options: JobOptions = Field(default_factory=JobOptions)
    notes: str = ""


class EditJobRequest(VehicleDescriptor):
    """
    Request schema for editing a pending job.

    Only fields present in the body change. Options are merged key by key
    into the stored options; an explicit null clears a vehicle field.
    """

    options: JobOptions | None = None
    notes: str | None = None


class CompleteJobRequest(BaseModel):
    """Request schema for completing a job."""

    processed_filename: str = Field(description="Storage reference of the processed file")


class OperatorMessageRequest(BaseModel):
    """Request schema for the operator's message to the requester."""

    client_message: str = ""


class JobResponse(BaseModel):
    """Response schema for a job."""

    id: UUID
    user_id: UUID
    owner_email: str | None = None
    original_filename: str
    options: JobOptions
    notes: str
    status: str
    has_processed_file: bool
    client_message: str | None = None
    vehicle_make: str | None = None
    vehicle_model: str | None = None
    vehicle_year: int | None = None
    ecu_controller: str | None = None
    created_at: datetime
    updated_at: datetime


class DownloadResponse(BaseModel):
    """Where a file lives in storage and the name to offer it under."""

    stored_filename: str
    download_name: str
