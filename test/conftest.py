import pytest
from fastapi.testclient import TestClient

from docrest.app import create_app
from docrest.core.config import DocRestConfig
from docrest.db.registry import InstanceRegistry


@pytest.fixture
def config(tmp_path):
    return DocRestConfig(root=tmp_path / "data")


@pytest.fixture
def app(config):
    return create_app(config)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def registry(tmp_path):
    registry = InstanceRegistry(tmp_path / "registry")
    yield registry
    registry.dispose()


@pytest.fixture
def collection(registry):
    return registry.resolve("shop", "products")
