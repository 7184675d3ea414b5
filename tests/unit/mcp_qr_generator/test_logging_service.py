# -*- coding: utf-8 -*-
"""Location: ./tests/unit/mcp_qr_generator/test_logging_service.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: MCP QR Generator Contributors

Unit tests for logging setup and request logging.
"""

# Standard
import json
import logging
from logging.handlers import RotatingFileHandler

# Third-Party
from fastapi import FastAPI
from fastapi.testclient import TestClient
import pytest

# First-Party
from mcp_qr_generator.config import ServerConfig
from mcp_qr_generator.middleware.request_logging_middleware import RequestLoggingMiddleware
from mcp_qr_generator.services.logging_service import LoggingService


@pytest.fixture
def service():
    svc = LoggingService()
    root = logging.getLogger()
    level = root.level
    yield svc
    svc.shutdown()
    root.setLevel(level)


def test_stderr_handler_when_enabled(service):
    service.configure(ServerConfig(enable_logging=True, log_level="warning"))
    assert logging.getLogger().level == logging.WARNING
    assert any(type(h) is logging.StreamHandler for h in service._handlers)


def test_null_handler_when_disabled(service):
    service.configure(ServerConfig(enable_logging=False))
    assert len(service._handlers) == 1
    assert isinstance(service._handlers[0], logging.NullHandler)


def test_json_log_file(service, tmp_path):
    log_file = tmp_path / "logs" / "server.log"
    service.configure(ServerConfig(enable_logging=False, log_file=str(log_file), log_level="debug"))
    assert any(isinstance(h, RotatingFileHandler) for h in service._handlers)

    service.get_logger("mcp_qr_generator.test").info("hello %s", "world")
    for handler in service._handlers:
        handler.flush()

    records = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert any(r["message"] == "hello world" and r["levelname"] == "INFO" for r in records)


def test_reconfigure_replaces_handlers(service):
    service.configure(ServerConfig(enable_logging=True))
    first = list(service._handlers)
    service.configure(ServerConfig(enable_logging=True))
    root = logging.getLogger()
    assert not any(h in root.handlers for h in first)


def test_get_logger_is_cached(service):
    assert service.get_logger("a.b") is service.get_logger("a.b")


def test_request_logging_middleware(caplog):
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware)

    @app.post("/echo")
    async def echo(payload: dict):
        return payload

    with caplog.at_level(logging.DEBUG, logger="mcp_qr_generator.middleware.request_logging_middleware"):
        response = TestClient(app).post("/echo", json={"a": 1})

    assert response.status_code == 200
    assert response.json() == {"a": 1}
    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith("Incoming request: POST /echo") for m in messages)
    assert any(m.startswith("POST /echo 200 ") for m in messages)
