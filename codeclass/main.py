import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from codeclass.core import config
from codeclass.database import Base, engine
from codeclass.models import user
from codeclass.routes import auth_routes

app = FastAPI(title='codeclass API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize() -> None:
    config.validate_runtime_config()
    try:
        Base.metadata.create_all(bind=engine, tables=[user.User.__table__])
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL.')


@app.get('/')
def root():
    return {'status': 'codeclass API running'}


app.include_router(auth_routes.router, prefix='/api/auth')
