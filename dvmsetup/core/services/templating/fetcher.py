"""
TemplateFetcher — download a template by identifier.

No caching: every call goes to the network, so a template edited
upstream is picked up by the next session.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from dvmsetup.adapters.net.http import fetch_text
from dvmsetup.core.errors import FetchError
from dvmsetup.core.models.template import Template

logger = logging.getLogger(__name__)


class TemplateFetcher:
    """Fetch ``<base_url>/<template_id>``.

    Args:
        base_url: Template repository root (http, https or file URL).
        transport: URL → text. Defaults to the urllib transport.
    """

    def __init__(self, base_url: str, transport: Callable[[str], str] = fetch_text):
        self.base_url = base_url.rstrip("/")
        self._transport = transport

    def url_for(self, template_id: str) -> str:
        return f"{self.base_url}/{template_id}"

    def fetch(self, template_id: str) -> Template:
        url = self.url_for(template_id)
        logger.info("Fetching template %s", url)
        try:
            text = self._transport(url)
        except UnicodeDecodeError as e:
            raise FetchError(template_id, url, f"not valid UTF-8 ({e.reason})") from e
        except (OSError, ValueError) as e:
            raise FetchError(template_id, url, str(e)) from e
        return Template(identifier=template_id, source_location=url, raw_text=text)
