import sys, os
from typing import Any, Dict, Optional

import pytest
import pytest_asyncio
import httpx
from httpx import ASGITransport
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from database import Base
from main import app
from models import QRAction, QRCode
from routes.utils import get_geo_lookup
from utils.qr_store import SqlQrStore, get_store
from utils.qr_types import LocationData
from helpers.fakes import FakeGeoLookup, MemoryQrStore


# ---------------------------------------------------------------------------
# 🗄️ Datenbank
# ---------------------------------------------------------------------------
@pytest.fixture
def session_local():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield testing_session_local
    engine.dispose()


@pytest.fixture
def sql_store(session_local):
    return SqlQrStore(session_local)


@pytest.fixture
def memory_store():
    return MemoryQrStore()


@pytest.fixture
def geo_lookup():
    return FakeGeoLookup(LocationData(country="Germany", city="Berlin"))


def seed_qr(session_local, qr_type: str, qr_id: Optional[str] = None, **fields: Any) -> str:
    with session_local() as db:
        qr = QRCode(qr_type=qr_type, title=fields.pop("title", f"{qr_type} test"), **fields)
        if qr_id:
            qr.id = qr_id
        db.add(qr)
        db.commit()
        return qr.id


def seed_action(session_local, qr_id: str, action_type: str, action_data: Dict[str, Any], **fields: Any) -> str:
    with session_local() as db:
        action = QRAction(qr_code_id=qr_id, action_type=action_type, action_data=action_data, **fields)
        db.add(action)
        db.commit()
        return action.id


@pytest.fixture
def seed(session_local):
    def _seed(qr_type: str, qr_id: Optional[str] = None, **fields: Any) -> str:
        return seed_qr(session_local, qr_type, qr_id, **fields)
    return _seed


@pytest.fixture
def seed_menu_action(session_local):
    def _seed(qr_id: str, action_type: str, action_data: Dict[str, Any], **fields: Any) -> str:
        return seed_action(session_local, qr_id, action_type, action_data, **fields)
    return _seed


# ---------------------------------------------------------------------------
# 🌐 HTTP
# ---------------------------------------------------------------------------
@pytest.fixture
def store_overrides(sql_store, geo_lookup):
    app.dependency_overrides[get_store] = lambda: sql_store
    app.dependency_overrides[get_geo_lookup] = lambda: geo_lookup
    yield app
    app.dependency_overrides.pop(get_store, None)
    app.dependency_overrides.pop(get_geo_lookup, None)


@pytest.fixture
def api_client(store_overrides):
    with TestClient(store_overrides, follow_redirects=False) as client:
        yield client


@pytest_asyncio.fixture
async def client():
    """Erstellt einen funktionierenden async Testclient."""
    transport = ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
