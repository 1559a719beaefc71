from __future__ import annotations

from types import SimpleNamespace

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from conftest import seed_action, seed_qr
from models import QRCode, QRScanLog
from utils import qr_store
from utils.qr_store import QrStoreError, SqlQrStore, SupabaseQrStore, build_store_from_env
from utils.qr_types import QrType, ScanLogEntry


# =============================================================================
# 🗄️ SqlQrStore
# =============================================================================
def test_get_record_maps_orm_row(session_local, sql_store):
    qr_id = seed_qr(
        session_local,
        "multi-url",
        multi_urls=[{"url": "a.example", "weight": 2}],
        geo_data={"address": "x"},
    )

    record = sql_store.get_qr_record(qr_id)

    assert record.id == qr_id
    assert record.kind is QrType.MULTI_URL
    assert record.is_active is True
    assert record.multi_urls == ({"url": "a.example", "weight": 2},)
    assert record.geo_data == {"address": "x"}
    assert record.action_data == {}
    assert record.scan_count == 0


def test_get_record_missing(sql_store):
    assert sql_store.get_qr_record("does-not-exist") is None


def test_actions_are_active_and_ordered(session_local, sql_store):
    qr_id = seed_qr(session_local, "multi-action")
    other = seed_qr(session_local, "multi-action")
    seed_action(session_local, qr_id, "website", {"url": "x.io"}, display_order=3)
    seed_action(session_local, qr_id, "call", {"phone": "1"}, display_order=1)
    seed_action(session_local, qr_id, "whatsapp", {"phone": "2"}, display_order=2, is_active=False)
    seed_action(session_local, other, "call", {"phone": "9"})

    actions = sql_store.get_qr_actions(qr_id)

    assert [a.action_type for a in actions] == ["call", "website"]
    assert actions[0].action_data == {"phone": "1"}


def test_insert_scan_log_truncates_long_fields(session_local, sql_store):
    qr_id = seed_qr(session_local, "static", destination_url="x.io")
    sql_store.insert_scan_log(
        ScanLogEntry(
            qr_code_id=qr_id,
            device_type="desktop",
            user_agent="U" * 600,
            referrer="https://r.example/" + "r" * 3000,
            country="Germany",
            city="Berlin",
            ip_address="93.184.216.34",
        )
    )

    with session_local() as db:
        log = db.scalars(select(QRScanLog)).one()
    assert log.qr_code_id == qr_id
    assert len(log.user_agent) == 512
    assert len(log.referrer) == 2048
    assert log.country == "Germany"
    assert log.scanned_at is not None


def test_increment_scan_count_is_cumulative(session_local, sql_store):
    qr_id = seed_qr(session_local, "static", destination_url="x.io")
    for _ in range(3):
        sql_store.increment_scan_count(qr_id)

    with session_local() as db:
        assert db.get(QRCode, qr_id).scan_count == 3


def test_read_errors_become_store_errors():
    def broken_session():
        raise OperationalError("SELECT 1", {}, Exception("db down"))

    store = SqlQrStore(broken_session)
    with pytest.raises(QrStoreError):
        store.get_qr_record("x")
    with pytest.raises(QrStoreError):
        store.get_qr_actions("x")


# =============================================================================
# ☁️ SupabaseQrStore
# =============================================================================
class FakeQuery:
    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.filters = []

    def select(self, columns):
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def limit(self, n):
        return self

    def order(self, column):
        return self

    def insert(self, row):
        self.client.inserted.append((self.table, row))
        return self

    def execute(self):
        if self.client.error:
            raise self.client.error
        rows = self.client.rows.get(self.table, [])
        for column, value in self.filters:
            rows = [r for r in rows if r.get(column) == value]
        return SimpleNamespace(data=rows)


class FakeSupabase:
    def __init__(self, rows=None, error=None):
        self.rows = rows or {}
        self.error = error
        self.inserted = []
        self.rpcs = []

    def table(self, name):
        return FakeQuery(self, name)

    def rpc(self, name, params):
        self.rpcs.append((name, params))
        return FakeQuery(self, "rpc")


def test_supabase_record_from_json_strings():
    client = FakeSupabase(
        {
            "qr_codes": [
                {
                    "id": "abc",
                    "qr_type": "geo",
                    "is_active": True,
                    "geo_data": '{"latitude": 1, "longitude": 2}',
                    "multi_urls": None,
                }
            ]
        }
    )
    record = SupabaseQrStore(client).get_qr_record("abc")
    assert record.kind is QrType.GEO
    assert record.geo_data == {"latitude": 1, "longitude": 2}
    assert SupabaseQrStore(client).get_qr_record("missing") is None


def test_supabase_actions_sorted_client_side():
    client = FakeSupabase(
        {
            "qr_actions": [
                {"id": "2", "qr_code_id": "abc", "action_type": "call", "display_order": 5, "is_active": True},
                {"id": "1", "qr_code_id": "abc", "action_type": "website", "display_order": 1, "is_active": True},
            ]
        }
    )
    actions = SupabaseQrStore(client).get_qr_actions("abc")
    assert [a.id for a in actions] == ["1", "2"]


def test_supabase_writes():
    client = FakeSupabase()
    store = SupabaseQrStore(client)
    store.insert_scan_log(ScanLogEntry(qr_code_id="abc", device_type="mobile", country="Unknown"))
    store.increment_scan_count("abc")

    table, row = client.inserted[0]
    assert table == "qr_scan_logs"
    assert row["qr_code_id"] == "abc"
    assert row["device_type"] == "mobile"
    assert "scanned_at" not in row
    assert client.rpcs == [("increment_scan_count", {"qr_id": "abc"})]


def test_supabase_errors_are_wrapped():
    store = SupabaseQrStore(FakeSupabase(error=RuntimeError("503")))
    with pytest.raises(QrStoreError):
        store.get_qr_record("abc")
    with pytest.raises(QrStoreError):
        store.increment_scan_count("abc")


# =============================================================================
# ⚙️ Auswahl per Umgebung
# =============================================================================
def test_store_defaults_to_sqlalchemy(monkeypatch):
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_KEY", raising=False)
    assert isinstance(build_store_from_env(), SqlQrStore)


def test_get_store_is_cached(monkeypatch):
    monkeypatch.setattr(qr_store, "_default_store", None)
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_KEY", raising=False)
    assert qr_store.get_store() is qr_store.get_store()
