"""
Process lifecycle for the root API: settings, socket binding and uvicorn.
"""

import logging
import signal
import socket

import uvicorn
from fastapi import FastAPI

from root_api.app import ServiceContext, create_application
from root_api.config import ServiceConfig, SettingsLoadError, config_load_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)

logger = logging.getLogger(__name__)


class StartupBindError(RuntimeError):
    """Raised when the listening socket cannot be bound."""


def server_bind_socket(config: ServiceConfig) -> socket.socket:
    """Bind a TCP socket on the configured host and port.

    Args:
        config: Resolved service settings

    Returns:
        Bound socket, ready to be handed to uvicorn

    Raises:
        StartupBindError: Port in use, insufficient privilege or bad host
    """
    family = socket.AF_INET6 if ":" in config.host else socket.AF_INET
    sock = socket.socket(family=family, type=socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((config.host, config.port))
    except OSError as error:
        sock.close()
        raise StartupBindError(
            f"Could not bind {config.host}:{config.port}: {error}"
        ) from error
    sock.set_inheritable(True)
    return sock


def _exit_on_signal(signum, frame):
    # uvicorn re-raises the stop signal after its own shutdown completes.
    raise SystemExit(0)


def server_run(app: FastAPI, sock: socket.socket) -> None:
    """Serve the application on an already bound socket until shutdown.

    SIGINT and SIGTERM end the process with status 0 once uvicorn has
    finished its graceful shutdown.
    """
    host, port = sock.getsockname()[:2]
    server = uvicorn.Server(uvicorn.Config(app, host=host, port=port, log_level="info"))
    for signum in STOP_SIGNALS:
        signal.signal(signum, _exit_on_signal)
    try:
        server.run(sockets=[sock])
    finally:
        sock.close()


def main() -> None:
    """Resolve settings, bind the port and serve until the process is stopped.

    Raises:
        SystemExit: With status 1 on invalid settings or bind failure
    """
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    try:
        config = config_load_settings()
    except SettingsLoadError as error:
        logger.error("%s", error)
        raise SystemExit(1) from error

    context = ServiceContext(config=config)
    app = create_application(context)

    try:
        sock = server_bind_socket(config)
    except StartupBindError as error:
        logger.error("%s", error)
        raise SystemExit(1) from error

    logger.info("Server is running on port %s", sock.getsockname()[1])
    logger.info("Environment: %s", config.environment_label)
    server_run(app, sock)
