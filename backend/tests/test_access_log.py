"""
Inkwell Backend: Access Log Middleware Tests
"""

import logging

import pytest

from inkwell.middleware.logging import level_for_status


@pytest.mark.parametrize(
    "status, level",
    [(200, logging.INFO), (304, logging.INFO), (401, logging.WARNING), (404, logging.WARNING), (500, logging.ERROR)],
)
def test_level_for_status(status, level):
    assert level_for_status(status) == level


@pytest.mark.asyncio
async def test_request_logged_with_request_id(test_client, caplog):
    caplog.set_level(logging.INFO, logger="inkwell.access")

    await test_client.get("/posts/all", headers={"X-Request-ID": "log-1"})

    lines = [r for r in caplog.records if r.name == "inkwell.access"]
    assert len(lines) == 1
    assert "GET /posts/all 200" in lines[0].getMessage()
    assert lines[0].request_id == "log-1"
    assert lines[0].levelno == logging.INFO


@pytest.mark.asyncio
async def test_client_errors_logged_as_warning(test_client, caplog):
    caplog.set_level(logging.INFO, logger="inkwell.access")

    await test_client.delete("/posts/not-a-uuid")

    (record,) = [r for r in caplog.records if r.name == "inkwell.access"]
    assert record.status == 401
    assert record.levelno == logging.WARNING


@pytest.mark.asyncio
async def test_health_checks_not_logged(test_client, caplog):
    caplog.set_level(logging.INFO, logger="inkwell.access")

    await test_client.get("/health")

    assert not [r for r in caplog.records if r.name == "inkwell.access"]


@pytest.mark.asyncio
async def test_authorization_header_never_logged(test_client, auth_headers, caplog):
    caplog.set_level(logging.DEBUG)
    token = auth_headers["alice"]["Authorization"].split(" ", 1)[1]

    await test_client.get("/auth/me", headers=auth_headers["alice"])

    assert token not in caplog.text
