"""Unit tests for the operator scripts"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from bazicash_gateway.domain.exceptions import AdminAPIError
from bazicash_gateway.tools.check_store_credit import check_store_credit
from bazicash_gateway.tools.setup_app_proxy import setup_app_proxy

pytestmark = pytest.mark.anyio


async def test_setup_app_proxy_registers_backend(admin_client, capsys):
    code = await setup_app_proxy(admin_client, "https://gw.example.com/", "bazicash", "apps", grace_seconds=0)

    out = capsys.readouterr().out
    assert code == 0
    assert "https://gw.example.com/proxy" in out
    assert "/apps/bazicash/balance" in out


async def test_setup_app_proxy_reports_user_errors(capsys):
    client = MagicMock()
    client.get_app_proxy = AsyncMock(return_value={"url": "https://old.example.com/proxy", "subPath": "x", "subPathPrefix": "apps"})
    client.set_app_proxy = AsyncMock(return_value={"appProxy": None, "userErrors": [{"field": ["url"], "message": "is invalid"}]})

    code = await setup_app_proxy(client, "ftp://nope", "bazicash", "apps", grace_seconds=0)

    out = capsys.readouterr().out
    assert code == 1
    assert "old.example.com" in out
    assert "is invalid" in out


async def test_setup_app_proxy_mutation_failure(capsys):
    client = MagicMock()
    client.get_app_proxy = AsyncMock(side_effect=AdminAPIError("denied"))
    client.set_app_proxy = AsyncMock(side_effect=AdminAPIError("denied"))

    assert await setup_app_proxy(client, "https://gw.example.com", "bazicash", "apps", grace_seconds=0) == 1


async def test_check_store_credit_prints_history(admin_client, capsys):
    code = await check_store_credit(admin_client, "ana@example.com")

    out = capsys.readouterr().out
    assert code == 0
    assert "Ana Souza" in out
    assert "R$ 270,50" in out
    assert "3 transações" in out
    assert "Economia: 57%" in out
    # most recent first
    assert out.index("10/03/2024") < out.index("05/03/2024") < out.index("01/03/2024")


async def test_check_store_credit_unknown_customer(admin_client, capsys):
    assert await check_store_credit(admin_client, "ghost@example.com") == 1
    assert "não encontrado" in capsys.readouterr().out


async def test_check_store_credit_without_account(admin_client, capsys):
    assert await check_store_credit(admin_client, "bruno@example.com") == 0
    assert "não possui Store Credit Account" in capsys.readouterr().out


async def test_check_store_credit_admin_failure(admin_client, capsys):
    assert await check_store_credit(admin_client, "boom@example.com") == 1
    assert "Erro na Admin API" in capsys.readouterr().out
