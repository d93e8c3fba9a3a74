from __future__ import annotations

import uuid
from dataclasses import dataclass, fields

_DEFAULT_MAX_LEN = 30


def create_random_name(prefix: str, max_len: int = _DEFAULT_MAX_LEN) -> str:
    """Return ``prefix`` followed by a random hex suffix, at most ``max_len`` long."""
    if len(prefix) >= max_len:
        raise ValueError(f"prefix {prefix!r} leaves no room for a suffix within {max_len}")
    suffix_len = min(max_len - len(prefix), 8)
    return f"{prefix}{uuid.uuid4().hex[:suffix_len]}"


@dataclass(frozen=True)
class SampleNames:
    resource_group: str
    circuit: str
    virtual_network: str
    public_ip: str
    gateway: str
    ip_configuration: str
    connection: str

    @classmethod
    def generate(cls) -> SampleNames:
        return cls(
            resource_group=create_random_name("NetworkSampleRG"),
            circuit=create_random_name("erc"),
            virtual_network=create_random_name("vnet"),
            public_ip=create_random_name("pip"),
            gateway=create_random_name("gateway"),
            ip_configuration=create_random_name("config"),
            connection=create_random_name("con"),
        )

    def as_dict(self) -> dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
