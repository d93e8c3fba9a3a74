from __future__ import annotations

from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import pytest

from expressroute.azure.clients import Clients

SUBSCRIPTION_ID = "00000000-0000-0000-0000-000000000000"


class FakePoller:
    def __init__(self, events: list[tuple[str, str]], op: str, value: Any) -> None:
        self._events = events
        self._op = op
        self._value = value
        self._done = False

    def status(self) -> str:
        return "Succeeded" if self._done else "InProgress"

    async def result(self) -> Any:
        self._done = True
        self._events.append(("done", self._op))
        return self._value


class FakeArm:
    """In-memory stand-in for the resource and network management clients."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.failures: dict[str, BaseException] = {}
        self.vnet_response: Callable[[str, str, dict[str, Any]], Any] | None = None

        self.res = SimpleNamespace(
            resource_groups=SimpleNamespace(
                create_or_update=self._op(
                    "resource_groups.create_or_update", self._group, lro=False
                ),
                begin_delete=self._op("resource_groups.begin_delete", lambda *a: None),
            )
        )
        self.net = SimpleNamespace(
            express_route_circuits=SimpleNamespace(
                begin_create_or_update=self._op(
                    "express_route_circuits.begin_create_or_update", self._named("expressRouteCircuits")
                )
            ),
            express_route_circuit_peerings=SimpleNamespace(
                begin_create_or_update=self._op(
                    "express_route_circuit_peerings.begin_create_or_update", self._peering
                )
            ),
            express_route_circuit_authorizations=SimpleNamespace(
                begin_create_or_update=self._op(
                    "express_route_circuit_authorizations.begin_create_or_update",
                    self._authorization,
                )
            ),
            virtual_networks=SimpleNamespace(
                begin_create_or_update=self._op("virtual_networks.begin_create_or_update", self._vnet)
            ),
            public_ip_addresses=SimpleNamespace(
                begin_create_or_update=self._op(
                    "public_ip_addresses.begin_create_or_update", self._named("publicIPAddresses")
                )
            ),
            virtual_network_gateways=SimpleNamespace(
                begin_create_or_update=self._op(
                    "virtual_network_gateways.begin_create_or_update",
                    self._named("virtualNetworkGateways"),
                )
            ),
            virtual_network_gateway_connections=SimpleNamespace(
                begin_create_or_update=self._op(
                    "virtual_network_gateway_connections.begin_create_or_update",
                    self._named("connections"),
                )
            ),
        )

    def clients(self) -> Clients:
        return Clients(subscription_id=SUBSCRIPTION_ID, cred=None, res=self.res, net=self.net)

    def calls_to(self, op: str) -> list[tuple[Any, ...]]:
        return [args for name, args in self.calls if name == op]

    def created(self) -> list[str]:
        return [name for name, _ in self.calls if "create_or_update" in name]

    def _op(self, op: str, build: Callable[..., Any], lro: bool = True) -> Callable[..., Any]:
        async def call(*args: Any) -> Any:
            self.events.append(("call", op))
            self.calls.append((op, args))
            if op in self.failures:
                raise self.failures[op]
            value = build(*args)
            if not lro:
                return value
            return FakePoller(self.events, op, value)

        return call

    @staticmethod
    def _rg_id(rg: str) -> str:
        return f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/{rg}"

    def _group(self, name: str, params: dict[str, Any]) -> Any:
        return SimpleNamespace(id=self._rg_id(name), name=name, location=params["location"])

    def _named(self, kind: str) -> Callable[..., Any]:
        def build(rg: str, name: str, params: dict[str, Any]) -> Any:
            rid = f"{self._rg_id(rg)}/providers/Microsoft.Network/{kind}/{name}"
            return SimpleNamespace(id=rid, name=name, location=params.get("location"))

        return build

    def _peering(self, rg: str, circuit: str, name: str, params: dict[str, Any]) -> Any:
        rid = f"{self._rg_id(rg)}/providers/Microsoft.Network/expressRouteCircuits/{circuit}/peerings/{name}"
        return SimpleNamespace(id=rid, name=name)

    def _authorization(self, rg: str, circuit: str, name: str, params: dict[str, Any]) -> Any:
        rid = f"{self._rg_id(rg)}/providers/Microsoft.Network/expressRouteCircuits/{circuit}/authorizations/{name}"
        return SimpleNamespace(id=rid, name=name, authorization_key="auth-key-123")

    def _vnet(self, rg: str, name: str, params: dict[str, Any]) -> Any:
        if self.vnet_response is not None:
            return self.vnet_response(rg, name, params)
        rid = f"{self._rg_id(rg)}/providers/Microsoft.Network/virtualNetworks/{name}"
        subnets = [
            SimpleNamespace(id=f"{rid}/subnets/{s['name']}", name=s["name"])
            for s in params["subnets"]
        ]
        return SimpleNamespace(id=rid, name=name, subnets=subnets)


class RecordingLogger:
    def __init__(self) -> None:
        self.records: list[tuple[str, str, dict[str, Any]]] = []

    def _log(self, level: str) -> Callable[..., None]:
        def log(event: str, **kwargs: Any) -> None:
            self.records.append((level, event, kwargs))

        return log

    def __getattr__(self, level: str) -> Callable[..., None]:
        return self._log(level)

    def events(self, level: str) -> list[str]:
        return [event for lvl, event, _ in self.records if lvl == level]


@pytest.fixture
def fake_arm() -> FakeArm:
    return FakeArm()


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()
