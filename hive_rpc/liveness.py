"""Startup probe waiting for the client's RPC ports to accept connections."""

import socket
import time
from typing import Sequence

from pytest_plugins.logging import get_logger

from .exceptions import LivenessTimeoutError

logger = get_logger(__name__)

DEFAULT_ETH_PORT = 8545
DEFAULT_ENGINE_PORT = 8551


def check_eth_engine_live(
    host: str,
    ports: Sequence[int] = (DEFAULT_ETH_PORT, DEFAULT_ENGINE_PORT),
    *,
    timeout: float = 5.0,
    interval: float = 0.1,
) -> None:
    """
    Poll a TCP connection to every port in `ports` until all of them accept connections.

    All ports share one deadline of `timeout` seconds; when it elapses
    `LivenessTimeoutError` is raised for the first port still closed.
    """
    deadline = time.monotonic() + timeout
    for port in ports:
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise LivenessTimeoutError(host, port, timeout)
            try:
                with socket.create_connection((host, port), timeout=min(interval, remaining)):
                    pass
            except OSError:
                time.sleep(max(0.0, min(interval, deadline - time.monotonic())))
                continue
            logger.verbose(f"{host}:{port} is accepting connections")
            break
