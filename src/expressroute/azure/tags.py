from __future__ import annotations


def standard_tags(extra: dict[str, str] | None = None) -> dict[str, str]:
    base: dict[str, str] = {"provisioned-by": "expressroute-sample"}
    if extra:
        base.update({k: str(v) for k, v in extra.items() if v is not None})
    return base
