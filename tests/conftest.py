from __future__ import annotations

from typing import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from registry_api.apis.servers_api import get_registry_service
from registry_api.app import create_app
from registry_api.config import RegistrySettings, get_settings
from registry_api.db import Base, create_registry_engine, create_session_factory
from registry_api.repo.server_versions import ServerVersionRepository
from registry_api.services.registry_service import RegistryService

PUBLISH_TOKEN = "test-publish-token"


@pytest.fixture()
def engine(tmp_path) -> Iterator[Engine]:
    engine = create_registry_engine(f"sqlite:///{(tmp_path / 'registry.sqlite').as_posix()}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return create_session_factory(engine)


@pytest.fixture()
def repo() -> ServerVersionRepository:
    return ServerVersionRepository()


@pytest.fixture()
def service(session_factory: sessionmaker[Session]) -> RegistryService:
    return RegistryService(session_factory=session_factory)


@pytest.fixture()
def settings(tmp_path) -> RegistrySettings:
    return RegistrySettings(
        database_url=f"sqlite:///{(tmp_path / 'registry.sqlite').as_posix()}",
        publish_token=PUBLISH_TOKEN,
        run_migrations=False,
    )


@pytest.fixture()
def app(service: RegistryService, settings: RegistrySettings) -> FastAPI:
    application = create_app()
    application.dependency_overrides[get_registry_service] = lambda: service
    application.dependency_overrides[get_settings] = lambda: settings
    return application


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {PUBLISH_TOKEN}"}
