from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence

from expressroute import __version__
from expressroute.azure.clients import open_clients
from expressroute.core.config import Settings, get_settings
from expressroute.core.exceptions import BaseApplicationException
from expressroute.core.logging import configure_logging, get_logger
from expressroute.workflow import run_sample

logger = get_logger("expressroute")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="expressroute-sample",
        description=(
            "Provision an ExpressRoute circuit, its peering, a virtual network and a "
            "virtual network gateway, then delete everything again."
        ),
    )
    parser.add_argument("--location", help="Azure region for every resource (default: eastus)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override observability.log_level",
    )
    parser.add_argument(
        "--log-format", choices=["json", "text"], help="Override observability.log_format"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


async def _run(settings: Settings, location: str | None) -> None:
    async with open_clients(cfg=settings.azure) as clients:
        await run_sample(clients, config=settings.sample, location=location)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    obs = settings.observability
    configure_logging(
        level=args.log_level or obs.log_level,
        fmt=args.log_format or obs.log_format,
        log_file=obs.log_file,
        max_bytes=obs.log_rotation_size_mb * 1024 * 1024,
        retention=obs.log_retention_days,
        context={"app": settings.app_name},
    )
    try:
        asyncio.run(_run(settings, args.location))
    except BaseApplicationException as exc:
        logger.error("Express route sample failed", **exc.get_context().to_dict())
        return 1
    except Exception as exc:
        logger.error(
            "Express route sample failed",
            error_type=type(exc).__name__,
            error=str(exc),
            exc_info=True,
        )
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
