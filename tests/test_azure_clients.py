import asyncio

import pytest
from azure.core.exceptions import ClientAuthenticationError, HttpResponseError, ServiceRequestError

from expressroute.azure import clients as azure_clients
from expressroute.azure.clients import Clients, build_clients, classify_error, run_poller
from expressroute.core.config import AzureConfig
from expressroute.core.exceptions import ConfigurationError


class _Poller:
    def __init__(self, value):
        self.value = value
        self.awaited = False

    def status(self) -> str:
        return "Succeeded" if self.awaited else "InProgress"

    async def result(self):
        self.awaited = True
        return self.value


def _clients() -> Clients:
    return Clients(subscription_id="sid", cred=None, res=object(), net=object())


def test_build_clients_requires_subscription() -> None:
    with pytest.raises(ConfigurationError):
        build_clients(cfg=AzureConfig())


def test_run_poller_waits_for_long_running_operation() -> None:
    poller = _Poller("done")

    async def begin(*args):
        assert args == ("rg", "name")
        return poller

    assert asyncio.run(run_poller(_clients(), begin, "rg", "name")) == "done"
    assert poller.awaited


def test_run_poller_returns_plain_results() -> None:
    async def create(name, params):
        return {"name": name, **params}

    result = asyncio.run(run_poller(_clients(), create, "rg", {"location": "eastus"}))
    assert result == {"name": "rg", "location": "eastus"}


def test_run_poller_reraises_without_retry(monkeypatch) -> None:
    calls = {"count": 0}
    error = HttpResponseError(message="throttled")
    error.status_code = 429

    async def begin(*args):
        calls["count"] += 1
        raise error

    with pytest.raises(HttpResponseError) as excinfo:
        asyncio.run(run_poller(_clients(), begin))
    assert excinfo.value is error
    assert calls["count"] == 1


def test_run_poller_propagates_poller_failure() -> None:
    class _Failing(_Poller):
        async def result(self):
            raise HttpResponseError(message="Conflict")

    async def begin(*args):
        return _Failing(None)

    with pytest.raises(HttpResponseError):
        asyncio.run(run_poller(_clients(), begin))


def test_classify_error() -> None:
    conflict = HttpResponseError(message="conflict")
    conflict.status_code = 409
    assert classify_error(conflict) == ("http_409", 409)
    assert classify_error(ClientAuthenticationError(message="nope"))[0] == "auth_error"
    assert classify_error(ServiceRequestError(message="dns"))[0] == "transient_io"
    assert classify_error(ValueError("x")) == ("unknown_error", None)


def test_close_closes_clients_and_credential() -> None:
    closed: list[str] = []

    class _Closable:
        def __init__(self, name: str) -> None:
            self.name = name

        async def close(self) -> None:
            closed.append(self.name)

    clients = Clients(
        subscription_id="sid",
        cred=_Closable("cred"),
        res=_Closable("res"),
        net=_Closable("net"),
    )
    asyncio.run(clients.close())
    assert closed == ["res", "net", "cred"]


def test_open_clients_closes_on_error(monkeypatch) -> None:
    closed = {"value": False}

    class _Handle:
        async def close(self) -> None:
            closed["value"] = True

    monkeypatch.setattr(azure_clients, "build_clients", lambda *a, **k: _Handle())

    async def run() -> None:
        async with azure_clients.open_clients():
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        asyncio.run(run())
    assert closed["value"] is True
