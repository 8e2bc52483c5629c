import time, json, logging
from typing import Protocol
from urllib.parse import urlparse
import httpx
from .config import Settings
from .stats import Stats

logger = logging.getLogger(__name__)


def host_of(url: str) -> str:
    try:
        return urlparse(url).netloc
    except ValueError:
        return ""


class ConditionChecker(Protocol):
    async def check(self, target: str) -> bool: ...


class HeadChecker:
    """Reports whether a HEAD request to the target answers 200 OK.

    Transport errors are logged and counted, never raised; they read as "not yet".
    """

    def __init__(self, client: httpx.AsyncClient, settings: Settings, stats: Stats):
        self.client = client
        self.settings = settings
        self.stats = stats

    async def check(self, target: str) -> bool:
        self.stats.inc_poll()
        started = time.monotonic()
        try:
            r = await self.client.request(
                "HEAD", target,
                headers={"User-Agent": self.settings.UA, "Accept": "text/html,*/*"},
                follow_redirects=True,
                timeout=httpx.Timeout(self.settings.TOTAL_TIMEOUT_S,
                                      connect=self.settings.CONNECT_TIMEOUT_S,
                                      read=self.settings.READ_TIMEOUT_S)
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            err = str(e) or e.__class__.__name__
            self.stats.record_poll_error(err)
            logger.warning(json.dumps({
                "outcome": "ERROR",
                "http": None,
                "error": err,
                "host": host_of(target),
                "url": target,
            }))
            return False

        found = r.status_code == httpx.codes.OK
        logger.info(json.dumps({
            "outcome": "FOUND" if found else "NOT_FOUND",
            "http": r.status_code,
            "elapsed_ms": round((time.monotonic() - started) * 1000, 1),
            "host": host_of(target),
            "url": target,
        }))
        return found
