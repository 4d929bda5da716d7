import pytest

from backend.core import config
from backend.core.errors import (
    AppointmentNotFoundError,
    InvalidAppointmentError,
    StoreUnavailableError,
)


def test_error_payload_omits_missing_detail() -> None:
    assert InvalidAppointmentError('Invalid ID.').to_payload() == {'message': 'Invalid ID.'}


def test_error_payload_includes_store_detail() -> None:
    error = StoreUnavailableError('Error fetching appointments.', 'connection refused')

    assert error.status_code == 500
    assert error.to_payload() == {'message': 'Error fetching appointments.', 'error': 'connection refused'}


def test_not_found_error_has_default_message() -> None:
    error = AppointmentNotFoundError()

    assert error.status_code == 404
    assert error.message == 'Appointment not found.'


@pytest.mark.parametrize(('raw', 'expected'), [(None, False), ('yes', True), (' ON ', True), ('0', False)])
def test_get_bool_parses_flags(raw, expected) -> None:
    assert config._get_bool(raw) is expected


def test_get_list_splits_comma_separated_values() -> None:
    assert config._get_list('http://a, ,http://b', ['x']) == ['http://a', 'http://b']
    assert config._get_list(None, ['x']) == ['x']


def test_validate_runtime_config_requires_database_url_in_production(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'APP_ENV', 'production')
    monkeypatch.setattr(config, 'DATABASE_URL', config.DEFAULT_DATABASE_URL)

    with pytest.raises(RuntimeError):
        config.validate_runtime_config()
