"""
============================================================================
URL KEEP-ALIVE - HTTP API SERVER
============================================================================
aiohttp server exposing the command and query surfaces.

    GET  /            → 200 "OK"  (basic liveness)
    GET  /health      → 200 JSON  { status, uptime, database, scheduler }
    GET  /api/urls    → 200 JSON  parallel mappings of every target
    POST /api/urls    → apply a {url, action} command

Error mapping
-------------
    ValidationException   → 400
    TargetNotFoundError   → 404
    CounterConflictError  → 409
    DatabaseException     → 503
============================================================================
"""

import json
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from aiohttp import web

from api.commands import CommandHandler
from config.settings import Settings
from database.manager import DatabaseManager
from exceptions import (
    CounterConflictError,
    DatabaseException,
    TargetNotFoundError,
    ValidationException,
)
from monitoring.scheduler import PingScheduler
from utils.helpers import TimeHelper
from utils.logger import get_logger


logger = get_logger("ApiServer")


class ApiServer:
    """
    Serves the JSON API on ``settings.web_host:settings.web_port``.

    Attributes
    ----------
    app : aiohttp.web.Application
    _runner : aiohttp.web.AppRunner
    _site : aiohttp.web.TCPSite
    _start_time : float          — epoch seconds when the server started
    _request_count : int         — total requests served
    """

    def __init__(
        self,
        settings: Settings,
        handler: CommandHandler,
        db_manager: Optional[DatabaseManager] = None,
        scheduler: Optional[PingScheduler] = None,
    ):
        self.settings = settings
        self.handler = handler
        self.db_manager = db_manager
        self.scheduler = scheduler
        self._host = settings.web_host
        self._port = settings.web_port
        self.app = web.Application()
        self._runner: Optional[web.AppRunner] = None
        self._site: Optional[web.TCPSite] = None
        self._start_time: float = time.time()
        self._request_count: int = 0

        self.app.router.add_get("/", self._handle_root)
        self.app.router.add_get("/health", self._handle_health)
        self.app.router.add_get("/api/urls", self._handle_list)
        self.app.router.add_post("/api/urls", self._handle_command)

    async def start(self) -> None:
        """Bind and start serving."""
        self._start_time = time.time()
        self._runner = web.AppRunner(self.app)
        await self._runner.setup()
        self._site = web.TCPSite(self._runner, self._host, self._port)
        await self._site.start()
        logger.info(f"✓ ApiServer listening on {self._host}:{self._port}")

    async def stop(self) -> None:
        """Gracefully shut down the server."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            self._site = None
        logger.info("✓ ApiServer stopped")

    # ------------------------------------------------------------------
    # ROUTE HANDLERS
    # ------------------------------------------------------------------

    async def _handle_root(self, request: web.Request) -> web.Response:
        """GET / — plain liveness check."""
        self._request_count += 1
        return web.Response(text="OK", status=200)

    async def _handle_health(self, request: web.Request) -> web.Response:
        """GET /health — detailed health JSON."""
        self._request_count += 1
        uptime_seconds = time.time() - self._start_time

        health: Dict[str, Any] = {
            "status": "healthy",
            "uptime_seconds": round(uptime_seconds, 1),
            "uptime_human": TimeHelper.seconds_to_human_readable(int(uptime_seconds)),
            "requests_served": self._request_count,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "app_name": self.settings.app_name,
            "app_version": self.settings.app_version,
        }

        if self.db_manager is not None:
            db_info = await self.db_manager.get_database_info()
            health["database"] = db_info
            if db_info.get("status") != "connected":
                health["status"] = "degraded"

        if self.scheduler is not None:
            health["scheduler"] = self.scheduler.get_stats()

        return web.json_response(health, status=200)

    async def _handle_list(self, request: web.Request) -> web.Response:
        """GET /api/urls — every target as parallel mappings."""
        self._request_count += 1
        try:
            payload = await self.handler.query()
        except DatabaseException as e:
            logger.error(f"GET /api/urls failed: {e.log_format()}")
            return self._error(e.user_message(), 503)
        return web.json_response(payload)

    async def _handle_command(self, request: web.Request) -> web.Response:
        """POST /api/urls — apply a ``{url, action}`` command."""
        self._request_count += 1
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return self._error("Request body must be a JSON object", 400)

        if not isinstance(body, dict):
            return self._error("Request body must be a JSON object", 400)

        try:
            outcome = await self.handler.handle(body.get("url"), body.get("action"))
        except ValidationException as e:
            return self._error(e.user_message(), 400)
        except TargetNotFoundError as e:
            return self._error(e.user_message(), 404)
        except CounterConflictError as e:
            return self._error(e.user_message(), 409)
        except DatabaseException as e:
            logger.error(f"POST /api/urls failed: {e.log_format()}")
            return self._error(e.user_message(), 503)

        return web.json_response(outcome.to_dict())

    @staticmethod
    def _error(message: str, status: int) -> web.Response:
        return web.json_response({"message": message}, status=status)
