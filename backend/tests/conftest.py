"""
Configuration partagée pour tous les tests.
- client     : override de get_db pour éviter toute connexion réelle à PostgreSQL
- db_session : base SQLite en mémoire pour les tests du magasin
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from unittest.mock import MagicMock

import backoffice.models  # noqa: F401
from backoffice.database import Base, get_db
from backoffice.main import app


@pytest.fixture
def client():
    """Client HTTP de test avec la BDD mockée."""
    mock_db = MagicMock()
    app.dependency_overrides[get_db] = lambda: mock_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    """En-têtes transmis par le proxy d'authentification pour un administrateur."""
    return {"X-User-Email": "admin@backoffice.pe", "X-User-Role": "admin"}


@pytest.fixture
def db_session():
    """Session SQLAlchemy sur une base SQLite en mémoire, schéma créé."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
