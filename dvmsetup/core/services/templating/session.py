"""
ConfigSession — generate the config files for one site type.

For each template of the site type, in order:

    fetch → extract placeholders → collect values → substitute → write

Writes go through the host's atomic writer, so a config file is either
absent or complete. The first failure ends the session; files written
earlier in the same session stay on disk.
"""

from __future__ import annotations

import logging
import posixpath

from dvmsetup.adapters.host.view import HostView
from dvmsetup.core.errors import PreconditionFailure
from dvmsetup.core.models.settings import Settings
from dvmsetup.core.models.template import GeneratedFile
from dvmsetup.core.services.templating.collector import ValueCollector
from dvmsetup.core.services.templating.fetcher import TemplateFetcher
from dvmsetup.core.services.templating.placeholders import extract, substitute

logger = logging.getLogger(__name__)


class ConfigSession:
    """One configuration run against one host."""

    def __init__(
        self,
        host: HostView,
        settings: Settings,
        fetcher: TemplateFetcher,
        collector: ValueCollector,
    ):
        self.host = host
        self.settings = settings
        self.fetcher = fetcher
        self.collector = collector
        self.generated: list[GeneratedFile] = []

    @property
    def config_dir(self) -> str:
        return self.settings.install.config_dir

    def check_ready(self) -> None:
        """Raise PreconditionFailure unless the config directory exists."""
        if not self.host.is_dir(self.config_dir):
            raise PreconditionFailure(
                f"Configuration directory {self.config_dir} does not exist. "
                "Install DVMHost first."
            )

    def generate(self, template_id: str) -> GeneratedFile:
        """Fetch, fill in, and write one template."""
        template = self.fetcher.fetch(template_id)
        placeholders = extract(template.raw_text)

        if placeholders:
            logger.info("%s: %d placeholder(s)", template_id, len(placeholders))
            bindings = self.collector.collect_all(placeholders)
            content = substitute(template.raw_text, bindings)
        else:
            logger.info("%s: no placeholders", template_id)
            content = template.raw_text

        path = posixpath.join(self.config_dir, template_id)
        self.host.write_text_atomic(path, content)
        logger.info("Wrote %s", path)

        generated = GeneratedFile(template_id=template_id, path=path,
                                  placeholders=list(placeholders))
        self.generated.append(generated)
        return generated

    def run(self, site_type: str) -> list[GeneratedFile]:
        """Generate every template of ``site_type``.

        Raises:
            PreconditionFailure: The config directory is missing.
            KeyError: ``site_type`` is not configured.
            FetchError: A template could not be fetched.
            InputExhausted: Input ended before all values were given.
        """
        site = self.settings.get_site_type(site_type)
        if site is None:
            raise KeyError(f"Unknown site type: {site_type}")

        self.check_ready()
        logger.info("Generating %s configuration", site.label)

        for template_id in site.templates:
            self.generate(template_id)
        return list(self.generated)
