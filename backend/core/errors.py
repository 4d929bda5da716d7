"""Application errors and their HTTP rendering."""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class AppointmentError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, error: str | None = None):
        super().__init__(message)
        self.message = message
        self.error = error

    def to_payload(self) -> dict:
        payload = {'message': self.message}
        if self.error:
            payload['error'] = self.error
        return payload


class InvalidAppointmentError(AppointmentError):
    status_code = status.HTTP_400_BAD_REQUEST


class AppointmentNotFoundError(AppointmentError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = 'Appointment not found.', error: str | None = None):
        super().__init__(message, error)


class StoreUnavailableError(AppointmentError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


REQUIRED_FIELDS_MESSAGE = 'All required fields must be filled in.'


def _describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = '.'.join(str(item) for item in error.get('loc', ()) if item != 'body')
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return '; '.join(parts)


async def appointment_error_handler(request: Request, exc: AppointmentError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = InvalidAppointmentError(REQUIRED_FIELDS_MESSAGE, _describe_validation_errors(exc))
    return JSONResponse(status_code=error.status_code, content=error.to_payload())
