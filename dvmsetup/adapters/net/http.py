"""
HTTP transport — downloading installers, archives and templates.

Two entry points share one urllib transport:

    HttpDownloadAdapter   an adapter ("http") that streams a URL to a file,
                          used by remediation phases through the registry.
    fetch_text            returns a URL body as text, used by the template
                          fetcher.

Both accept http, https and file URLs. No timeout is applied: on a slow
uplink a release archive can take minutes.
"""

from __future__ import annotations

import logging
import time
import urllib.error
import urllib.request
from pathlib import Path

from dvmsetup.adapters.base import Adapter, ExecutionContext
from dvmsetup.core.models.action import Receipt

logger = logging.getLogger(__name__)

USER_AGENT = "dvmsetup/1.0"
_CHUNK = 8192


def _open(url: str, timeout: float | None = None):
    req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    if timeout is None:
        return urllib.request.urlopen(req)
    return urllib.request.urlopen(req, timeout=timeout)


def fetch_text(url: str, timeout: float | None = None) -> str:
    """Fetch ``url`` and decode it as UTF-8.

    Raises:
        OSError: On any transport failure (URLError and HTTPError are
            OSError subclasses).
        UnicodeDecodeError: If the body is not UTF-8.
    """
    logger.debug("GET %s", url)
    with _open(url, timeout) as resp:
        body = resp.read()
    return body.decode("utf-8")


class HttpDownloadAdapter(Adapter):
    """Stream a URL to a local file.

    Action params:
        url (str): Source URL.
        dest (str): Destination file path. Parent must exist.
        timeout (float | None): Timeout in seconds (default: None).
    """

    @property
    def name(self) -> str:
        return "http"

    def is_available(self) -> bool:
        return True

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        url = context.params.get("url", "")
        dest = context.params.get("dest", "")
        if not url:
            return False, "Missing required param: 'url'"
        if not dest:
            return False, "Missing required param: 'dest'"
        if not Path(dest).parent.is_dir():
            return False, f"Destination directory does not exist: {Path(dest).parent}"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        url = context.params["url"]
        dest = Path(context.params["dest"])
        timeout = context.params.get("timeout")

        logger.debug("Downloading %s -> %s", url, dest)
        start = time.monotonic()
        size = 0

        try:
            with _open(url, timeout) as resp, open(dest, "wb") as f:
                while True:
                    chunk = resp.read(_CHUNK)
                    if not chunk:
                        break
                    f.write(chunk)
                    size += len(chunk)
        except urllib.error.HTTPError as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Download failed: HTTP {e.code} for {url}",
                metadata={"url": url, "status": e.code},
            )
        except (OSError, ValueError) as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Download failed: {e}",
                metadata={"url": url},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        return Receipt.success(
            adapter=self.name,
            action_id=context.action.id,
            output=f"Downloaded {size} bytes",
            duration_ms=elapsed_ms,
            metadata={"url": url, "dest": str(dest), "size_bytes": size},
        )
