"""
Job ORM model.

One uploaded file awaiting processing by the operator, with the options
the requester selected and the lifecycle status.

Dependencies: sqlalchemy, tuning_backend.boundary.db.base
System role: Tuning job persistence
"""

import enum
from uuid import UUID

from sqlalchemy import JSON, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tuning_backend.boundary.db.base import Base, TimestampMixin, UUIDMixin


class JobStatus(str, enum.Enum):
    """
    Job lifecycle states.

    PENDING: Submitted, editable by its owner, awaiting the operator
    COMPLETED: Operator attached the processed file (terminal)
    CANCELLED: Operator cancelled the job (terminal)
    """

    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class JobModel(Base, UUIDMixin, TimestampMixin):
    """
    Job ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        user_id: Owning requester
        original_filename: Name of the file as uploaded
        stored_filename: Opaque reference of the uploaded file in storage
        options: Processing flags captured at submission
                 (dpf_off, egr_off, adblue_off, dtc_off, dtc_codes, immo_off)
        notes: Free-text notes from the requester
        status: Lifecycle status enum (PENDING/COMPLETED/CANCELLED)
        processed_filename: Storage reference of the processed file, set on completion
        client_message: Operator-authored message shown to the requester
        vehicle_make, vehicle_model, vehicle_year: Optional vehicle descriptor
        ecu_controller: Optional controller identifier
        created_at: Submission timestamp (UTC)
        updated_at: Last modification timestamp (UTC)

    Workflow:
        1. Requester submits; status=PENDING
        2. Requester may edit options/notes/vehicle while PENDING
        3. Operator completes (with processed file) or cancels
        4. Rows are never deleted
    """

    __tablename__ = "jobs"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    original_filename: Mapped[str] = mapped_column(String(255), nullable=False)
    stored_filename: Mapped[str] = mapped_column(String(255), nullable=False)

    options: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        doc="Processing options selected at submission",
    )

    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    status: Mapped[JobStatus] = mapped_column(
        Enum(JobStatus, native_enum=False),
        nullable=False,
        default=JobStatus.PENDING,
    )

    processed_filename: Mapped[str | None] = mapped_column(String(255), nullable=True)
    client_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    vehicle_make: Mapped[str | None] = mapped_column(String(100), nullable=True)
    vehicle_model: Mapped[str | None] = mapped_column(String(100), nullable=True)
    vehicle_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    ecu_controller: Mapped[str | None] = mapped_column(String(100), nullable=True)
