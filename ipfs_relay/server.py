"""Run the relay under uvicorn, blocking or in a background thread."""

import logging
import threading
import time

import uvicorn
from fastapi import FastAPI

logger = logging.getLogger(__name__)


def _config(app: FastAPI, host: str, port: int) -> uvicorn.Config:
    return uvicorn.Config(
        app,
        host=host,
        port=port,
        loop="asyncio",
        log_config=None,
        access_log=False,
    )


def serve_forever(app: FastAPI, host: str, port: int) -> None:
    """Serve in the calling thread until the process is signalled."""
    uvicorn.Server(_config(app, host, port)).run()


class RelayServer:
    """Manages a relay server running on a daemon thread."""

    def __init__(
        self,
        app: FastAPI,
        host: str,
        port: int,
        *,
        startup_timeout_s: float = 5.0,
    ) -> None:
        self._app = app
        self._host = host
        self._port = port
        self._startup_timeout_s = startup_timeout_s
        self._server: uvicorn.Server | None = None
        self._thread: threading.Thread | None = None

    @property
    def started(self) -> bool:
        return self._server is not None and self._server.started

    def start(self) -> None:
        """Start serving and return once uvicorn reports it is listening."""
        if self._thread is not None:
            return

        self._server = uvicorn.Server(_config(self._app, self._host, self._port))
        self._thread = threading.Thread(target=self._server.run, name="ipfs-relay-server", daemon=True)
        self._thread.start()
        try:
            self._wait_until_started()
        except Exception:
            self.stop()
            raise

        logger.info("relay server started: http://%s:%d", self._host, self._port)

    def _wait_until_started(self) -> None:
        if self._server is None or self._thread is None:
            raise RuntimeError("relay server thread not initialized")

        deadline = time.monotonic() + self._startup_timeout_s
        while True:
            if self._server.started:
                return

            if not self._thread.is_alive():
                raise RuntimeError("relay server exited before startup completed")

            if time.monotonic() >= deadline:
                raise TimeoutError(
                    f"Timed out waiting for relay server startup on {self._host}:{self._port}"
                )

            time.sleep(0.01)

    def stop(self) -> None:
        if self._server is None or self._thread is None:
            return
        self._server.should_exit = True
        self._thread.join()
        self._thread = None
        self._server = None
        logger.info("relay server stopped")
