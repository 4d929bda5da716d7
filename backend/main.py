import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from backend.core import config
from backend.core.errors import (
    AppointmentError,
    appointment_error_handler,
    request_validation_error_handler,
)
from backend.database import Base, dispose_engine, engine, ensure_appointment_schema
from backend.models import appointment  # noqa: F401
from backend.routes import admin_routes, appointment_routes

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

config.validate_runtime_config()

app = FastAPI(title='Appointments API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

app.add_exception_handler(AppointmentError, appointment_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_database() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        ensure_appointment_schema()
        logger.info('Database connected (%s).', engine.url.get_backend_name())
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.on_event('shutdown')
def close_database() -> None:
    dispose_engine()
    logger.info('Database connection closed.')


@app.get('/')
def root():
    return {'status': 'Appointments API Running'}


app.include_router(appointment_routes.router, prefix='/appointments')
app.include_router(admin_routes.router, prefix='/admin')
