from __future__ import annotations

import argparse
import base64
import json
import logging
import os
from datetime import date
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs, urlparse

import hmac

from dotenv import load_dotenv

from finance_tracker.config import LOG_LEVEL_ENV, configure_logging, load_config
from finance_tracker.core.aggregator import category_breakdown, monthly_series
from finance_tracker.core.savings import goal_progress, split_goals
from finance_tracker.database import (
    fetch_transactions,
    get_piggy_bank,
    get_profile,
    list_categories,
    list_piggy_bank_entries,
    list_savings_goals,
)
from finance_tracker.formatting import format_currency, settings_for_currency
from finance_tracker.reports import build_report

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD_KEY = "finance-tracker"
PASSWORD_FILE_ENV = "FINANCE_TRACKER_PASSWORD_FILE"
PASSWORD_KEY_ENV = "FINANCE_TRACKER_PASSWORD_KEY"


def _xor_bytes(data: bytes, key: bytes) -> bytes:
    return bytes(byte ^ key[idx % len(key)] for idx, byte in enumerate(data))


def _encode_password(password: str, key: str) -> str:
    encoded = _xor_bytes(password.encode("utf-8"), key.encode("utf-8"))
    return f"enc:{base64.urlsafe_b64encode(encoded).decode('utf-8')}"


def _decode_password(payload: str, key: str) -> str:
    text = payload.strip()
    if text.startswith("plain:"):
        return text.split("plain:", 1)[1]
    if text.startswith("enc:"):
        text = text[4:]
    decoded = base64.urlsafe_b64decode(text.encode("utf-8"))
    return _xor_bytes(decoded, key.encode("utf-8")).decode("utf-8")


def _extract_auth_password(header_value: str | None) -> str | None:
    if not header_value:
        return None
    if header_value.startswith("Basic "):
        token = header_value[6:].strip()
        try:
            decoded = base64.b64decode(token, validate=True).decode("utf-8")
        except (ValueError, UnicodeDecodeError):
            return None
        if ":" not in decoded:
            return None
        return decoded.split(":", 1)[1]
    if header_value.startswith("Bearer "):
        return header_value[7:].strip()
    return None


def _load_password_file(path: str, key: str) -> str | None:
    try:
        payload = Path(path).read_text(encoding="utf-8")
    except (FileNotFoundError, IsADirectoryError, PermissionError):
        return None
    return _decode_password(payload, key)


def _parse_date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None


def _parse_month(value: str | None) -> date:
    if not value:
        return date.today()
    year, month = value.split("-")
    return date(int(year), int(month), 1)


def _parse_int(value: str | None, default: int | None = None) -> int | None:
    if value is None or value == "":
        return default
    return int(value)


def _json_response(handler: BaseHTTPRequestHandler, payload: Any, status: int = 200) -> None:
    body = json.dumps(payload).encode("utf-8")
    handler.send_response(status)
    handler.send_header("Content-Type", "application/json")
    handler.send_header("Cache-Control", "no-store")
    handler.send_header("Content-Length", str(len(body)))
    handler.end_headers()
    handler.wfile.write(body)


def _transaction_payload(tx) -> dict:
    return {
        "id": tx.id,
        "kind": tx.kind.value,
        "amount": float(tx.amount),
        "category_id": tx.category_id,
        "description": tx.description,
        "date": tx.date.isoformat(),
    }


class FinanceWebHandler(BaseHTTPRequestHandler):
    db_path = "finance.db"
    user_id = "local"
    report_months = 6
    password_file: str | None = None
    password_key: str = DEFAULT_PASSWORD_KEY

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug("%s - %s", self.address_string(), format % args)

    def do_GET(self) -> None:
        if not self._authorize_request():
            return
        parsed = urlparse(self.path)
        if parsed.path.startswith("/api/"):
            self._handle_api(parsed)
            return
        _json_response(self, {"error": "not found"}, status=404)

    def _settings(self):
        try:
            return settings_for_currency(get_profile(self.db_path, self.user_id).currency)
        except KeyError:
            return settings_for_currency("BRL")

    def _handle_api(self, parsed) -> None:
        query = parse_qs(parsed.query)
        path = parsed.path

        try:
            if path == "/api/overview":
                reference = _parse_month(_get_param(query, "month"))
                months = _parse_int(_get_param(query, "months"), default=self.report_months)
                report = build_report(
                    fetch_transactions(self.db_path, self.user_id),
                    list_categories(self.db_path, self.user_id),
                    reference,
                    months,
                )
                payload = report.as_dict()
                settings = self._settings()
                payload["currency"] = settings.currency
                payload["formatted"] = {
                    "income": format_currency(report.month.income, settings),
                    "expense": format_currency(report.month.expense, settings),
                    "balance": format_currency(report.month.balance, settings),
                    "total_balance": format_currency(report.balance, settings),
                }
                _json_response(self, payload)
                return

            if path == "/api/series":
                series = monthly_series(
                    fetch_transactions(self.db_path, self.user_id),
                    _parse_month(_get_param(query, "month")),
                    _parse_int(_get_param(query, "count"), default=self.report_months),
                )
                _json_response(self, [m.as_dict() for m in series])
                return

            if path == "/api/breakdown":
                kind = _get_param(query, "kind") or "expense"
                stats = category_breakdown(
                    fetch_transactions(self.db_path, self.user_id),
                    list_categories(self.db_path, self.user_id),
                    _parse_month(_get_param(query, "month")),
                    kind,
                )
                _json_response(self, [s.as_dict() for s in stats])
                return

            if path == "/api/transactions":
                txs = fetch_transactions(
                    self.db_path,
                    self.user_id,
                    start_date=_parse_date(_get_param(query, "start_date")),
                    end_date=_parse_date(_get_param(query, "end_date")),
                    limit=_parse_int(_get_param(query, "limit"), default=200),
                )
                _json_response(self, [_transaction_payload(t) for t in txs])
                return

            if path == "/api/categories":
                categories = list_categories(self.db_path, self.user_id, kind=_get_param(query, "kind"))
                _json_response(
                    self,
                    [
                        {
                            "id": c.id,
                            "name": c.name,
                            "icon": c.icon,
                            "color": c.color,
                            "kind": c.kind.value,
                            "is_default": c.is_default,
                        }
                        for c in categories
                    ],
                )
                return

            if path == "/api/savings":
                active, completed = split_goals(list_savings_goals(self.db_path, self.user_id))
                bank = get_piggy_bank(self.db_path, self.user_id)
                entries = list_piggy_bank_entries(self.db_path, self.user_id)
                _json_response(
                    self,
                    {
                        "goals": [
                            {
                                "id": g.id,
                                "name": g.name,
                                "target_amount": float(g.target_amount),
                                "current_amount": float(g.current_amount),
                                "progress": goal_progress(g),
                                "deadline": g.deadline.isoformat() if g.deadline else None,
                                "is_completed": g.is_completed,
                            }
                            for g in active + completed
                        ],
                        "piggy_bank": {
                            "balance": float(bank.balance),
                            "entries": [
                                {
                                    "kind": e.kind.value,
                                    "amount": float(e.amount),
                                    "description": e.description,
                                    "created_at": e.created_at.isoformat() if e.created_at else None,
                                }
                                for e in entries
                            ],
                        },
                    },
                )
                return
        except KeyError as exc:
            _json_response(self, {"error": str(exc.args[0])}, status=404)
            return
        except ValueError as exc:
            _json_response(self, {"error": str(exc)}, status=400)
            return
        except Exception as exc:
            logger.exception("Request %s failed", path)
            _json_response(self, {"error": str(exc)}, status=500)
            return

        _json_response(self, {"error": "not found"}, status=404)

    def _authorize_request(self) -> bool:
        if not self.password_file:
            return True
        expected = _load_password_file(self.password_file, self.password_key)
        if expected is None:
            self.send_error(500, "Password file not found")
            return False
        provided = _extract_auth_password(self.headers.get("Authorization"))
        if provided is None or not hmac.compare_digest(provided, expected):
            self.send_response(401)
            self.send_header("WWW-Authenticate", 'Basic realm="Finance Tracker"')
            self.send_header("Cache-Control", "no-store")
            self.end_headers()
            return False
        return True


def _get_param(query: dict[str, list[str]], key: str) -> str | None:
    values = query.get(key)
    return values[0] if values else None


def build_handler(
    config: dict,
    db_path: str | None = None,
    user_id: str | None = None,
    password_file: str | None = None,
    password_key: str = DEFAULT_PASSWORD_KEY,
) -> type:
    """Handler class bound to the store and report settings in *config*.

    Explicit *db_path* and *user_id* override the config values.
    """
    return type(
        "FinanceWebHandler",
        (FinanceWebHandler,),
        {
            "db_path": db_path or config["db_path"],
            "user_id": user_id or config["user_id"],
            "report_months": int(config["report_months"]),
            "password_file": password_file,
            "password_key": password_key,
        },
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Finance tracker JSON dashboard")
    parser.add_argument("--config", default="config.yaml", help="Path to config.yaml (default: config.yaml)")
    parser.add_argument("--db", dest="db_path", default=None, help="Path to SQLite database (overrides config)")
    parser.add_argument("--user", dest="user_id", default=None, help="User id to serve (overrides config)")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind (default: 8000)")
    parser.add_argument("--env-file", default=None, help="Optional .env file")
    args, _ = parser.parse_known_args()
    if args.env_file:
        load_dotenv(args.env_file)

    parser.add_argument(
        "--password-file",
        default=os.environ.get(PASSWORD_FILE_ENV),
        help="Path to encrypted password file",
    )
    parser.add_argument(
        "--password-key",
        default=os.environ.get(PASSWORD_KEY_ENV, DEFAULT_PASSWORD_KEY),
        help="Encryption key for password file",
    )
    args = parser.parse_args()
    configure_logging(os.getenv(LOG_LEVEL_ENV, "INFO"))

    try:
        config = load_config(args.config)
    except ValueError as exc:
        parser.error(str(exc))
    handler = build_handler(
        config,
        db_path=args.db_path,
        user_id=args.user_id,
        password_file=args.password_file,
        password_key=args.password_key,
    )
    server = ThreadingHTTPServer((args.host, args.port), handler)
    logger.info("Finance tracker dashboard running at http://%s:%s (db: %s)", args.host, args.port, handler.db_path)
    server.serve_forever()


if __name__ == "__main__":
    main()
