from __future__ import annotations

import asyncio
import inspect
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

from azure.core.credentials_async import AsyncTokenCredential
from azure.core.exceptions import (
    AzureError,
    ClientAuthenticationError,
    HttpResponseError,
    ServiceRequestError,
    ServiceResponseError,
)
from azure.mgmt.network.aio import NetworkManagementClient
from azure.mgmt.resource.resources.aio import ResourceManagementClient

from expressroute.core.azure_auth import build_async_credential
from expressroute.core.config import AzureConfig, get_settings
from expressroute.core.exceptions import ConfigurationError
from expressroute.core.logging import get_logger

logger = get_logger(__name__)


def _sub_id(explicit: str | None, cfg: AzureConfig) -> str:
    sid = explicit or cfg.subscription_id
    if not sid:
        raise ConfigurationError(
            "subscription_id",
            "no subscription configured; set SUBSCRIPTION_ID or AZURE__SUBSCRIPTION_ID",
        )
    return sid


@dataclass(frozen=True)
class Clients:
    """Authenticated handle over the two ARM surfaces the sample needs."""

    subscription_id: str
    cred: AsyncTokenCredential | None
    res: ResourceManagementClient
    net: NetworkManagementClient

    async def run(
        self, fn: Callable[..., Any] | Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any
    ) -> Any:
        if inspect.iscoroutinefunction(fn):
            return await fn(*args, **kwargs)
        res = fn(*args, **kwargs)
        if inspect.isawaitable(res):
            return await res
        return res

    async def close(self) -> None:
        for attr in ("res", "net"):
            try:
                close = getattr(getattr(self, attr), "close", None)
                if callable(close):
                    if inspect.iscoroutinefunction(close):
                        await close()
                    else:
                        await asyncio.to_thread(close)
            except Exception as e:
                logger.debug("azure_clients.close_error", client=attr, error=str(e))

        try:
            cclose = getattr(self.cred, "close", None)
            if callable(cclose):
                await cclose()
        except Exception as e:
            logger.debug("azure_clients.credential_close_error", error=str(e))


def build_clients(
    subscription_id: str | None = None,
    credential: AsyncTokenCredential | None = None,
    cfg: AzureConfig | None = None,
) -> Clients:
    cfg = cfg or get_settings().azure
    sid = _sub_id(subscription_id, cfg)
    cred = credential or build_async_credential(cfg)
    logger.debug("azure_clients.build", subscription_id=sid)
    return Clients(
        subscription_id=sid,
        cred=cred,
        res=ResourceManagementClient(cred, sid),
        net=NetworkManagementClient(cred, sid),
    )


@asynccontextmanager
async def open_clients(
    subscription_id: str | None = None,
    credential: AsyncTokenCredential | None = None,
    cfg: AzureConfig | None = None,
) -> AsyncIterator[Clients]:
    clients = build_clients(subscription_id, credential, cfg)
    try:
        yield clients
    finally:
        await clients.close()


def _http_status(e: BaseException) -> int | None:
    if isinstance(e, HttpResponseError):
        sc = getattr(e, "status_code", None)
        if sc is not None:
            return int(sc)
        resp = getattr(e, "response", None)
        if resp is not None:
            sc = getattr(resp, "status_code", None)
            if sc is not None:
                return int(sc)
    return None


def classify_error(e: BaseException) -> tuple[str, int | None]:
    if isinstance(e, ClientAuthenticationError):
        return "auth_error", _http_status(e)
    if isinstance(e, ServiceRequestError | ServiceResponseError | TimeoutError | OSError):
        return "transient_io", _http_status(e)
    if isinstance(e, HttpResponseError):
        sc = _http_status(e)
        return (f"http_{sc}" if sc is not None else "http_error"), sc
    if isinstance(e, AzureError):
        return "azure_error", _http_status(e)
    return "unknown_error", _http_status(e)


def _is_poller(obj: Any) -> bool:
    return hasattr(obj, "result") and hasattr(obj, "status")


async def run_poller(
    clients: Clients,
    fn: Callable[..., Any] | Callable[..., Awaitable[Any]],
    *args: Any,
    **kwargs: Any,
) -> Any:
    """Issue ``fn`` and block until its long-running operation completes.

    Calls that are not long-running return their value directly. Failures
    are logged with a classified error code and re-raised unchanged; no
    retry is attempted.
    """
    operation = getattr(fn, "__qualname__", getattr(fn, "__name__", repr(fn)))
    try:
        poller = await clients.run(fn, *args, **kwargs)
        if not _is_poller(poller):
            return poller
        res = poller.result()
        if inspect.isawaitable(res):
            return await res
        return res
    except Exception as e:
        code, sc = classify_error(e)
        logger.error(
            "azure_clients.operation.error",
            operation=operation,
            subscription_id=clients.subscription_id,
            error_type=type(e).__name__,
            error_code=code,
            http_status=sc,
        )
        raise
