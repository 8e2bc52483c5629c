import time, asyncio, logging
from contextlib import asynccontextmanager
from typing import Awaitable, Callable, Optional

import httpx
import uvicorn
from fastapi import FastAPI, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse
from jinja2 import TemplateError

from .config import Settings, load_settings
from .stats import Stats
from .checker import ConditionChecker, HeadChecker
from .poller import Poller
from .weather import WeatherClient, WeatherLookupError, DecodeError, UpstreamRejectedError
from . import ui

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _page(name: str, status_code: int = 200, **context) -> HTMLResponse:
    try:
        return HTMLResponse(ui.render(name, **context), status_code=status_code)
    except TemplateError as e:
        logger.error("rendering %s failed: %s", name, e)
        return HTMLResponse(ui.FALLBACK_HTML, status_code=500)


def create_app(settings: Optional[Settings] = None,
               transport: Optional[httpx.AsyncBaseTransport] = None,
               checker: Optional[ConditionChecker] = None,
               sleep: Callable[[float], Awaitable[None]] = asyncio.sleep) -> FastAPI:
    """Build the app. The poller and the shared HTTP client live for the app's lifespan.

    transport, checker and sleep are there for tests; production passes none of them.
    """
    settings = settings or load_settings()
    stats = Stats()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        limits = httpx.Limits(max_connections=10, max_keepalive_connections=5)
        async with httpx.AsyncClient(limits=limits, transport=transport) as client:
            app.state.weather = WeatherClient(settings.WEATHER_API_URL, settings.WEATHER_API_KEY, client,
                                              user_agent=settings.UA, timeout=settings.TOTAL_TIMEOUT_S)
            app.state.poller = Poller(settings.VERSION, settings.change_url, settings.POLL_PERIOD_S,
                                      checker or HeadChecker(client, settings, stats), sleep=sleep)
            app.state.started_at = time.time()
            try:
                yield
            finally:
                await app.state.poller.stop()

    app = FastAPI(title="outyet", lifespan=lifespan)
    app.state.settings = settings
    app.state.stats = stats

    @app.get("/", response_class=HTMLResponse)
    def index(request: Request):
        """Is the version out yet?"""
        stats.inc_hit()
        snap = request.app.state.poller.snapshot()
        return _page("index", label=snap.label, check_target=snap.check_target, satisfied=snap.satisfied)

    @app.get("/submit", response_class=HTMLResponse)
    @app.get("/login", response_class=HTMLResponse)
    def weather_form():
        return _page("form")

    @app.post("/submit", response_class=HTMLResponse)
    @app.post("/login", response_class=HTMLResponse)
    async def weather_lookup(request: Request, zip_code: str = Form("", alias="zip")):
        """Forward the submitted zip code (or city) to the weather API and render what comes back."""
        query = zip_code.strip()
        if not query:
            return _page("error", status_code=400, message="Please enter a zip code.")

        stats.inc_lookup()
        try:
            report = await request.app.state.weather.lookup(query)
        except DecodeError as e:
            stats.inc_lookup_error()
            logger.warning("malformed weather response for %r: %s", query, e)
            return _page("error", status_code=502, message=f"The weather service sent an unexpected answer ({e}).")
        except UpstreamRejectedError as e:
            stats.inc_lookup_error()
            logger.info("weather service rejected %r: %s", query, e)
            return _page("error", status_code=400, message=f"No weather found for {query!r} ({e}).")
        except WeatherLookupError as e:
            stats.inc_lookup_error()
            logger.warning("weather lookup for %r failed: %s", query, e)
            return _page("error", status_code=502, message=f"The weather service is unavailable ({e}).")
        return _page("result", report=report)

    @app.get("/health", response_class=JSONResponse)
    def health(request: Request):
        now = time.time()
        return JSONResponse({"ok": True, "ts": now,
                             "uptime_s": int(now - request.app.state.started_at),
                             "satisfied": request.app.state.poller.satisfied})

    @app.get("/debug/vars", response_class=JSONResponse)
    def debug_vars():
        """Monitoring counters, expvar style."""
        return JSONResponse(stats.as_dict())

    return app


def run() -> None:
    settings = load_settings()
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=LOG_FORMAT)
    logger.info("serving on %s:%s, watching %s every %ss",
                settings.HOST, settings.PORT, settings.change_url, settings.POLL_PERIOD_S)
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
