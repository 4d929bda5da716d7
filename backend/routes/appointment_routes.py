import logging
from datetime import date, datetime, time, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, field_serializer, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.core.errors import (
    AppointmentNotFoundError,
    InvalidAppointmentError,
    StoreUnavailableError,
)
from backend.database import SessionLocal, ensure_appointment_schema
from backend.models.appointment import Appointment

router = APIRouter(tags=['appointments'])

logger = logging.getLogger(__name__)

REQUIRED_TEXT_FIELDS = ('specialty', 'student', 'professional')


def parse_date_value(value) -> datetime:
    """Parse an ISO-8601 date or date-time into a naive UTC datetime.

    Date-only values resolve to midnight. Values with an offset (or a
    trailing ``Z``) are converted to UTC before the offset is dropped.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        normalized = value.strip()
        if not normalized:
            raise ValueError('Date is required.')
        try:
            parsed = datetime.fromisoformat(normalized)
        except ValueError as exc:
            raise ValueError(f'Invalid date: {normalized!r}.') from exc
    else:
        raise ValueError('Invalid date.')

    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        except OverflowError as exc:
            raise ValueError(f'Invalid date: {value!r} is out of range in UTC.') from exc
    return parsed


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return f"{value.strftime('%Y-%m-%dT%H:%M:%S')}.{value.microsecond // 1000:03d}Z"


def parse_appointment_id(raw_id: str) -> str:
    try:
        return UUID(raw_id.strip()).hex
    except (AttributeError, ValueError) as exc:
        raise InvalidAppointmentError('Invalid ID.') from exc


def student_matches(student: str | None, search_term: str) -> bool:
    """Case-folded substring match, independent of the database's collation."""
    return search_term.casefold() in (student or '').casefold()


class AppointmentCreateRequest(BaseModel):
    specialty: str
    date: datetime
    student: str
    professional: str
    comments: str | None = None

    @field_validator(*REQUIRED_TEXT_FIELDS)
    @classmethod
    def validate_required_text(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('This field is required.')
        return normalized

    @field_validator('date', mode='before')
    @classmethod
    def validate_date(cls, value) -> datetime:
        return parse_date_value(value)

    @field_validator('comments')
    @classmethod
    def validate_comments(cls, value: str | None) -> str | None:
        if value is None:
            return None

        normalized = value.strip()
        return normalized or None


class AppointmentUpdateRequest(AppointmentCreateRequest):
    """Same required fields as creation; only fields sent in the body are written."""

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class AppointmentResponse(BaseModel):
    id: str
    specialty: str
    comments: str | None = None
    date: datetime
    student: str
    professional: str

    class Config:
        from_attributes = True

    @field_serializer('date')
    def serialize_date(self, value: datetime) -> str:
        return format_timestamp(value)


class AppointmentRangeResponse(BaseModel):
    foundAppointments: list[AppointmentResponse]


class AppointmentCreatedResponse(BaseModel):
    message: str
    newAppointment: AppointmentResponse


class AppointmentUpdatedResponse(BaseModel):
    message: str
    updatedAppointment: AppointmentResponse


class AppointmentDeletedResponse(BaseModel):
    message: str
    deletedAppointment: AppointmentResponse


def ensure_database_ready() -> None:
    try:
        ensure_appointment_schema()
    except SQLAlchemyError as exc:
        logger.exception('Appointment schema check failed.')
        raise StoreUnavailableError('Database unavailable.', str(exc)) from exc


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def store_failure(db: Session, message: str, exc: SQLAlchemyError) -> StoreUnavailableError:
    db.rollback()
    logger.exception(message)
    return StoreUnavailableError(message, str(exc))


def get_appointment_or_404(db: Session, appointment_id: str) -> Appointment:
    appointment = db.get(Appointment, appointment_id)
    if appointment is None:
        raise AppointmentNotFoundError()
    return appointment


@router.get('/date', response_model=AppointmentRangeResponse)
def list_appointments_by_date(
    start_date: str = Query(..., alias='startDate'),
    end_date: str = Query(..., alias='endDate'),
    db: Session = Depends(get_db),
):
    try:
        range_start = parse_date_value(start_date)
        range_end = parse_date_value(end_date)
    except ValueError as exc:
        raise InvalidAppointmentError('Invalid date range.', str(exc)) from exc

    ensure_database_ready()

    try:
        appointments = db.query(Appointment).filter(
            Appointment.date >= range_start,
            Appointment.date <= range_end,
        ).order_by(Appointment.date.asc()).all()
    except SQLAlchemyError as exc:
        raise store_failure(db, 'Error fetching appointments.', exc) from exc

    return AppointmentRangeResponse(
        foundAppointments=[AppointmentResponse.model_validate(appointment) for appointment in appointments],
    )


@router.get('/', response_model=list[AppointmentResponse])
def list_appointments(db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        appointments = db.query(Appointment).order_by(Appointment.date.asc()).all()
    except SQLAlchemyError as exc:
        raise store_failure(db, 'Error fetching appointments.', exc) from exc

    return [AppointmentResponse.model_validate(appointment) for appointment in appointments]


@router.get('/student', response_model=list[AppointmentResponse])
def list_appointments_by_student(
    student: str | None = Query(default=None),
    db: Session = Depends(get_db),
):
    search_term = (student or '').strip()
    if not search_term:
        raise InvalidAppointmentError('Please provide the student name.')

    ensure_database_ready()

    try:
        appointments = db.query(Appointment).order_by(Appointment.date.asc()).all()
    except SQLAlchemyError as exc:
        raise store_failure(db, 'Error fetching appointments by student.', exc) from exc

    return [
        AppointmentResponse.model_validate(appointment)
        for appointment in appointments
        if student_matches(appointment.student, search_term)
    ]


@router.get('/{appointment_id}', response_model=AppointmentResponse)
def get_appointment(appointment_id: str, db: Session = Depends(get_db)):
    normalized_id = parse_appointment_id(appointment_id)

    ensure_database_ready()

    try:
        appointment = get_appointment_or_404(db, normalized_id)
    except SQLAlchemyError as exc:
        raise store_failure(db, 'Error fetching appointment.', exc) from exc

    return AppointmentResponse.model_validate(appointment)


@router.post('/', response_model=AppointmentCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(data: AppointmentCreateRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        appointment = Appointment(
            specialty=data.specialty,
            date=data.date,
            student=data.student,
            professional=data.professional,
            comments=data.comments,
        )
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
    except SQLAlchemyError as exc:
        raise store_failure(db, 'Error adding appointment.', exc) from exc

    logger.info('Created appointment %s for %s.', appointment.id, appointment.student)

    return AppointmentCreatedResponse(
        message='Appointment added successfully!',
        newAppointment=AppointmentResponse.model_validate(appointment),
    )


@router.put('/{appointment_id}', response_model=AppointmentUpdatedResponse)
def update_appointment(
    appointment_id: str,
    data: AppointmentUpdateRequest,
    db: Session = Depends(get_db),
):
    normalized_id = parse_appointment_id(appointment_id)

    ensure_database_ready()

    try:
        appointment = get_appointment_or_404(db, normalized_id)

        for field_name, value in data.changes().items():
            setattr(appointment, field_name, value)

        db.commit()
        db.refresh(appointment)
    except SQLAlchemyError as exc:
        raise store_failure(db, 'Error updating appointment.', exc) from exc

    return AppointmentUpdatedResponse(
        message='Appointment updated successfully!',
        updatedAppointment=AppointmentResponse.model_validate(appointment),
    )


@router.delete('/{appointment_id}', response_model=AppointmentDeletedResponse)
def delete_appointment(appointment_id: str, db: Session = Depends(get_db)):
    normalized_id = parse_appointment_id(appointment_id)

    ensure_database_ready()

    try:
        appointment = get_appointment_or_404(db, normalized_id)
        deleted = AppointmentResponse.model_validate(appointment)

        db.delete(appointment)
        db.commit()
    except SQLAlchemyError as exc:
        raise store_failure(db, 'Error deleting appointment.', exc) from exc

    logger.info('Deleted appointment %s.', deleted.id)

    return AppointmentDeletedResponse(
        message='Appointment deleted successfully!',
        deletedAppointment=deleted,
    )
