import base64
import json
import threading
import urllib.error
import urllib.request
from datetime import date
from http.server import ThreadingHTTPServer

import pytest

from finance_tracker import database as db
from finance_tracker import web
from finance_tracker.config import load_config

USER = "web-user"


@pytest.fixture
def seeded_db(tmp_path):
    path = str(tmp_path / "finance.db")
    db.bootstrap_user(path, USER, currency="USD")
    cats = {c.name: c.id for c in db.list_categories(path, USER)}
    db.add_transaction(path, USER, "income", 1000, date(2024, 3, 5), cats["Salary"])
    db.add_transaction(path, USER, "expense", 300, date(2024, 3, 10), cats["Food"])
    db.add_transaction(path, USER, "expense", 100, date(2024, 3, 11), cats["Transport"])
    db.add_transaction(path, USER, "expense", 200, date(2024, 2, 20))
    db.add_savings_goal(path, USER, "Trip", 400)
    db.deposit_to_piggy_bank(path, USER, 25)
    return path


def _serve(db_path, **attrs):
    handler = type(
        "TestHandler",
        (web.FinanceWebHandler,),
        {"db_path": db_path, "user_id": USER, **attrs},
    )
    server = ThreadingHTTPServer(("127.0.0.1", 0), handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    return server


@pytest.fixture
def server(seeded_db):
    srv = _serve(seeded_db)
    yield srv
    srv.shutdown()
    srv.server_close()


def _get(server, path, headers=None):
    host, port = server.server_address
    req = urllib.request.Request(f"http://{host}:{port}{path}", headers=headers or {})
    try:
        with urllib.request.urlopen(req) as resp:
            return resp.status, json.load(resp)
    except urllib.error.HTTPError as exc:
        body = exc.read()
        return exc.code, json.loads(body) if body else None


def test_overview(server):
    status, payload = _get(server, "/api/overview?month=2024-03&months=3")
    assert status == 200
    assert payload["month"] == {"income": 1000.0, "expense": 400.0, "balance": 600.0}
    assert payload["total_balance"] == 400.0
    assert payload["formatted"]["total_balance"] == "$400.00"
    assert [m["label"] for m in payload["series"]] == ["Jan", "Feb", "Mar"]
    expense = payload["breakdown"]["expense"]
    assert [(s["name"], s["percentage"]) for s in expense] == [("Food", 75.0), ("Transport", 25.0)]


def test_series_and_breakdown(server):
    status, series = _get(server, "/api/series?month=2024-01&count=2")
    assert status == 200
    assert [(m["year"], m["month"]) for m in series] == [(2023, 12), (2024, 1)]

    status, stats = _get(server, "/api/breakdown?month=2024-03&kind=income")
    assert status == 200
    assert stats[0]["name"] == "Salary"
    assert stats[0]["percentage"] == 100.0


def test_transactions_and_categories(server):
    status, txs = _get(server, "/api/transactions?start_date=2024-03-01&end_date=2024-03-31")
    assert status == 200
    assert [t["amount"] for t in txs] == [100.0, 300.0, 1000.0]

    status, cats = _get(server, "/api/categories?kind=income")
    assert status == 200
    assert len(cats) == 5
    assert all(c["kind"] == "income" for c in cats)


def test_savings(server):
    status, payload = _get(server, "/api/savings")
    assert status == 200
    assert payload["goals"][0]["name"] == "Trip"
    assert payload["goals"][0]["progress"] == 0.0
    assert payload["piggy_bank"]["balance"] == 25.0
    assert payload["piggy_bank"]["entries"][0]["kind"] == "deposit"


def test_errors(server):
    assert _get(server, "/api/series?count=0")[0] == 400
    assert _get(server, "/api/breakdown?kind=transfer")[0] == 400
    assert _get(server, "/api/nothing")[0] == 404


def test_password_protection(seeded_db, tmp_path):
    password_file = tmp_path / "password"
    password_file.write_text(web._encode_password("open-sesame", "k"))
    srv = _serve(seeded_db, password_file=str(password_file), password_key="k")
    try:
        status, _ = _get(srv, "/api/overview")
        assert status == 401
        creds = base64.b64encode(b"me:open-sesame").decode("utf-8")
        status, _ = _get(srv, "/api/overview", headers={"Authorization": f"Basic {creds}"})
        assert status == 200
    finally:
        srv.shutdown()
        srv.server_close()


def test_handler_uses_config_report_months(seeded_db, tmp_path):
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text(f"db_path: {seeded_db}\nuser_id: {USER}\nreport_months: 3\n")
    handler = web.build_handler(load_config(cfg_path))
    assert handler.db_path == seeded_db
    assert handler.report_months == 3

    srv = ThreadingHTTPServer(("127.0.0.1", 0), handler)
    threading.Thread(target=srv.serve_forever, daemon=True).start()
    try:
        status, series = _get(srv, "/api/series?month=2024-03")
        assert status == 200
        assert [m["label"] for m in series] == ["Jan", "Feb", "Mar"]
    finally:
        srv.shutdown()
        srv.server_close()


def test_build_handler_arguments_override_config(tmp_path):
    handler = web.build_handler(load_config(None), db_path=str(tmp_path / "other.db"), user_id="someone")
    assert handler.db_path == str(tmp_path / "other.db")
    assert handler.user_id == "someone"
    assert handler.report_months == 6
