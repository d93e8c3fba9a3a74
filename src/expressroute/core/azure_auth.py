from __future__ import annotations

import time

from azure.core.credentials_async import AsyncTokenCredential
from azure.identity.aio import AzureCliCredential as AzureCliCredentialAsync
from azure.identity.aio import ChainedTokenCredential as ChainedTokenCredentialAsync
from azure.identity.aio import ClientSecretCredential as ClientSecretCredentialAsync
from azure.identity.aio import DefaultAzureCredential as DefaultAzureCredentialAsync
from azure.identity.aio import EnvironmentCredential as EnvironmentCredentialAsync
from azure.identity.aio import ManagedIdentityCredential as ManagedIdentityCredentialAsync

from expressroute.core.config import AzureConfig, get_settings
from expressroute.core.exceptions import ConfigurationError
from expressroute.core.logging import get_logger

logger = get_logger(__name__)

_CLOUD_HOSTS = {
    "public": "https://login.microsoftonline.com",
    "usgov": "https://login.microsoftonline.us",
    "china": "https://login.chinacloudapi.cn",
}


def _authority_host(cfg: AzureConfig) -> str:
    if cfg.authority_host:
        return cfg.authority_host.rstrip("/")
    return _CLOUD_HOSTS.get(cfg.cloud, _CLOUD_HOSTS["public"])


def _chained(cfg: AzureConfig, authority: str) -> AsyncTokenCredential:
    credentials: list[AsyncTokenCredential] = []
    try:
        credentials.append(EnvironmentCredentialAsync(authority=authority))
    except Exception as e:
        logger.debug(
            "EnvironmentCredentialAsync unavailable",
            error=str(e),
            error_type=type(e).__name__,
        )
    try:
        credentials.append(
            ManagedIdentityCredentialAsync(client_id=cfg.user_assigned_identity_client_id)
        )
    except Exception as e:
        logger.debug(
            "ManagedIdentityCredentialAsync unavailable",
            error=str(e),
            error_type=type(e).__name__,
        )
    if cfg.enable_cli_fallback:
        credentials.append(AzureCliCredentialAsync())
    if credentials:
        return ChainedTokenCredentialAsync(*credentials)
    return DefaultAzureCredentialAsync(authority=authority)


def build_async_credential(cfg: AzureConfig | None = None) -> AsyncTokenCredential:
    """Build the async credential selected by ``cfg.auth_mode``.

    The default mode mirrors the classic sample setup: a service principal
    described by ``CLIENT_ID``, ``CLIENT_SECRET`` and ``TENANT_ID``.
    """
    cfg = cfg or get_settings().azure
    authority = _authority_host(cfg)
    start = time.perf_counter()
    logger.debug("build_async_credential.start", auth_mode=cfg.auth_mode, authority=authority)

    credential: AsyncTokenCredential
    if cfg.auth_mode == "service_principal":
        missing = [
            name
            for name, value in (
                ("tenant_id", cfg.tenant_id),
                ("client_id", cfg.client_id),
                ("client_secret", cfg.client_secret),
            )
            if not value
        ]
        if missing or cfg.client_secret is None:
            raise ConfigurationError(
                "azure", f"service_principal auth requires {', '.join(missing)}"
            )
        credential = ClientSecretCredentialAsync(
            tenant_id=cfg.tenant_id,
            client_id=cfg.client_id,
            client_secret=cfg.client_secret.get_secret_value(),
            authority=authority,
        )
    elif cfg.auth_mode == "managed_identity":
        credential = ManagedIdentityCredentialAsync(
            client_id=cfg.user_assigned_identity_client_id
        )
    elif cfg.auth_mode == "azure_cli":
        credential = AzureCliCredentialAsync()
    elif cfg.auth_mode == "environment":
        credential = EnvironmentCredentialAsync(authority=authority)
    else:
        credential = _chained(cfg, authority)

    logger.debug(
        "build_async_credential.end",
        credential_type=type(credential).__name__,
        duration_ms=(time.perf_counter() - start) * 1000.0,
    )
    return credential
