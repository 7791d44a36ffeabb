from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from openbeta_site.core.config import get_settings
from openbeta_site.db import models


def get_engine(database_url: str | None = None):
    return create_engine(database_url or get_settings().database_url, future=True)


def init_db(engine) -> None:
    models.Base.metadata.create_all(engine)


engine = get_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
