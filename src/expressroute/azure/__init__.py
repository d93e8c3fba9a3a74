from __future__ import annotations

from .clients import Clients, build_clients, open_clients, run_poller

__all__ = ["Clients", "build_clients", "open_clients", "run_poller"]
