from __future__ import annotations

import ipaddress
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

GATEWAY_SUBNET_NAME = "GatewaySubnet"


def _check_prefix(value: str) -> str:
    try:
        ipaddress.ip_network(value, strict=False)
    except ValueError as err:
        raise ValueError(f"invalid address prefix: {value}") from err
    return value


class AzureConfig(BaseModel):
    subscription_id: str | None = Field(default=None, pattern="^[a-f0-9-]{36}$")
    tenant_id: str | None = Field(default=None, pattern="^[a-f0-9-]{36}$")
    client_id: str | None = None
    client_secret: SecretStr | None = None
    auth_mode: Literal[
        "service_principal",
        "managed_identity",
        "azure_cli",
        "environment",
        "default",
    ] = "service_principal"
    user_assigned_identity_client_id: str | None = None
    cloud: Literal["public", "usgov", "china"] = "public"
    authority_host: str | None = None
    default_location: str = "eastus"
    allowed_locations: list[str] = Field(
        default_factory=lambda: [
            "eastus",
            "eastus2",
            "westus",
            "westus2",
            "centralus",
            "westeurope",
            "northeurope",
            "uksouth",
        ]
    )
    enable_cli_fallback: bool = True

    @field_validator("allowed_locations", mode="before")
    @classmethod
    def _normalize_locations(cls, v: Any) -> list[str]:
        if not v:
            return ["eastus"]
        return [str(x).lower().strip() for x in v]

    @field_validator("default_location", mode="before")
    @classmethod
    def _normalize_default_location(cls, v: Any) -> str:
        return str(v).lower().strip() if v else "eastus"

    @model_validator(mode="after")
    def _validate_cloud_and_location(self) -> AzureConfig:
        if self.default_location not in set(self.allowed_locations):
            raise ValueError("default_location must be one of allowed_locations")
        if self.cloud == "public" and not self.authority_host:
            self.authority_host = "https://login.microsoftonline.com"
        return self


class ObservabilityConfig(BaseModel):
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation_size_mb: int = Field(default=10, ge=1)
    log_retention_days: int = Field(default=7, ge=1)


class CircuitConfig(BaseModel):
    sku_tier: Literal["Standard", "Premium", "Local"] = "Premium"
    sku_family: Literal["MeteredData", "UnlimitedData"] = "MeteredData"
    service_provider_name: str = "bvtazureixp01"
    peering_location: str = "boydton 1 dc"
    bandwidth_in_mbps: int = Field(default=200, gt=0)
    tags: dict[str, str] = Field(default_factory=lambda: {"key": "value"})

    @property
    def sku_name(self) -> str:
        return f"{self.sku_tier}_{self.sku_family}"


class PeeringConfig(BaseModel):
    peering_type: Literal[
        "MicrosoftPeering", "AzurePrivatePeering", "AzurePublicPeering"
    ] = "MicrosoftPeering"
    peer_asn: int = Field(default=1000, ge=1, le=4294967295)
    vlan_id: int = Field(default=400, ge=1, le=4094)
    primary_peer_address_prefix: str = "199.168.200.0/30"
    secondary_peer_address_prefix: str = "199.168.202.0/30"
    advertised_public_prefixes: list[str] = Field(default_factory=lambda: ["fc02::1/128"])
    legacy_mode: int = Field(default=1, ge=0, le=1)

    @field_validator("primary_peer_address_prefix", "secondary_peer_address_prefix")
    @classmethod
    def _validate_peer_prefix(cls, v: str) -> str:
        return _check_prefix(v)

    @field_validator("advertised_public_prefixes")
    @classmethod
    def _validate_advertised(cls, v: list[str]) -> list[str]:
        return [_check_prefix(p) for p in v]


class SubnetConfig(BaseModel):
    name: str
    address_prefix: str

    @field_validator("address_prefix")
    @classmethod
    def _validate_prefix(cls, v: str) -> str:
        return _check_prefix(v)


class VirtualNetworkConfig(BaseModel):
    address_prefix: str = "192.168.0.0/16"
    subnets: list[SubnetConfig] = Field(
        default_factory=lambda: [
            SubnetConfig(name=GATEWAY_SUBNET_NAME, address_prefix="192.168.200.0/26"),
            SubnetConfig(name="FrontEnd", address_prefix="192.168.1.0/24"),
        ]
    )

    @field_validator("address_prefix")
    @classmethod
    def _validate_prefix(cls, v: str) -> str:
        return _check_prefix(v)

    @model_validator(mode="after")
    def _require_gateway_subnet(self) -> VirtualNetworkConfig:
        if not any(s.name == GATEWAY_SUBNET_NAME for s in self.subnets):
            raise ValueError(f"subnets must include a subnet named {GATEWAY_SUBNET_NAME}")
        space = ipaddress.ip_network(self.address_prefix, strict=False)
        for subnet in self.subnets:
            net = ipaddress.ip_network(subnet.address_prefix, strict=False)
            if net.version != space.version or not net.subnet_of(space):  # type: ignore[arg-type]
                raise ValueError(
                    f"subnet {subnet.name} ({subnet.address_prefix}) is outside {self.address_prefix}"
                )
        return self


class PublicIpConfig(BaseModel):
    allocation_method: Literal["Dynamic", "Static"] = "Dynamic"
    sku: Literal["Basic", "Standard"] = "Basic"


class GatewayConfig(BaseModel):
    sku_name: str = "Basic"
    sku_tier: str = "Basic"
    gateway_type: Literal["Vpn", "ExpressRoute"] = "Vpn"
    vpn_type: Literal["RouteBased", "PolicyBased"] = "RouteBased"
    enable_bgp: bool = False
    tags: dict[str, str] = Field(default_factory=lambda: {"key": "value"})


class ExpressRouteSampleConfig(BaseModel):
    location: str | None = None
    circuit: CircuitConfig = Field(default_factory=CircuitConfig)
    peering: PeeringConfig = Field(default_factory=PeeringConfig)
    virtual_network: VirtualNetworkConfig = Field(default_factory=VirtualNetworkConfig)
    public_ip: PublicIpConfig = Field(default_factory=PublicIpConfig)
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    add_authorization: bool = False
    authorization_name: str = "myAuthorization"
    create_connection: bool = False

    @field_validator("location", mode="before")
    @classmethod
    def _normalize_location(cls, v: Any) -> str | None:
        return str(v).lower().strip() if v else None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )

    app_name: str = "ExpressRoute Sample"

    azure: AzureConfig = Field(default_factory=AzureConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    sample: ExpressRouteSampleConfig = Field(default_factory=ExpressRouteSampleConfig)

    client_id: str | None = None
    client_secret: SecretStr | None = None
    tenant_id: str | None = None
    subscription_id: str | None = None

    @model_validator(mode="after")
    def apply_legacy_env(self) -> Settings:
        if self.client_id and not self.azure.client_id:
            self.azure.client_id = self.client_id
        if self.client_secret and not self.azure.client_secret:
            self.azure.client_secret = self.client_secret
        if self.tenant_id and not self.azure.tenant_id:
            self.azure.tenant_id = self.tenant_id
        if self.subscription_id and not self.azure.subscription_id:
            self.azure.subscription_id = self.subscription_id
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
