# src/infrastructure/Database/session.py
import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from src.infrastructure.Database.base import Base

logger = logging.getLogger(__name__)


def build_engine(database_url: str) -> Engine:
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    engine = create_engine(database_url, connect_args=connect_args)
    logger.info("Engine de BD creado: %s", engine.url.render_as_string(hide_password=True))
    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    # Importar entidades para registrarlas en el metadata
    from src.infrastructure.Database.entities import plate_entity  # noqa: F401

    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
