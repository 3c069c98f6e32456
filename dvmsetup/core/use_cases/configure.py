"""
Configure use case — run a ConfigSession and record what it wrote.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from dvmsetup.core.context import RunContext
from dvmsetup.core.engine.executor import (
    EXIT_FAILED,
    EXIT_OK,
    EXIT_PRECONDITION,
    generate_operation_id,
)
from dvmsetup.core.errors import InputExhausted, PreconditionFailure, TransferFailure
from dvmsetup.core.models.template import GeneratedFile
from dvmsetup.core.persistence.audit import AuditEntry
from dvmsetup.core.services.host_profile import check_os_version
from dvmsetup.core.services.templating.collector import InputProvider, ValueCollector
from dvmsetup.core.services.templating.fetcher import TemplateFetcher
from dvmsetup.core.services.templating.session import ConfigSession

logger = logging.getLogger(__name__)


@dataclass
class ConfigureResult:
    """Outcome of a configuration session."""

    operation_id: str = ""
    site_type: str = ""
    generated: list[GeneratedFile] = field(default_factory=list)
    error: str | None = None
    exit_code: int = EXIT_OK

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def status(self) -> str:
        if self.exit_code == EXIT_OK:
            return "ok"
        if self.exit_code == EXIT_PRECONDITION:
            return "precondition_failed"
        return "failed"

    def to_dict(self) -> dict:
        result: dict = {
            "operation_id": self.operation_id,
            "site_type": self.site_type,
            "status": self.status,
            "exit_code": self.exit_code,
            "files": [g.model_dump(mode="json") for g in self.generated],
        }
        if self.error:
            result["error"] = self.error
        return result


def run_configure(
    ctx: RunContext,
    site_type: str,
    provider: InputProvider,
    base_url: str | None = None,
    fetcher: TemplateFetcher | None = None,
) -> ConfigureResult:
    """Generate the configuration files for ``site_type``.

    Args:
        ctx: Run context.
        site_type: Site type key (``cc-vc``, ``conventional``).
        provider: Where placeholder values come from.
        base_url: Override for the template repository URL.
        fetcher: Pre-built fetcher (tests).

    Returns:
        ConfigureResult. Files written before a failure are listed too.
    """
    result = ConfigureResult(operation_id=generate_operation_id(), site_type=site_type)

    if fetcher is None:
        fetcher = TemplateFetcher(base_url or ctx.settings.templates.base_url)
    session = ConfigSession(ctx.host, ctx.settings, fetcher, ValueCollector(provider))

    try:
        problem = check_os_version(ctx.profile, ctx.settings)
        if problem:
            raise PreconditionFailure(problem)
        session.run(site_type)
    except PreconditionFailure as e:
        result.error = str(e)
        result.exit_code = EXIT_PRECONDITION
    except KeyError as e:
        result.error = str(e.args[0]) if e.args else "Unknown site type"
        result.exit_code = EXIT_FAILED
    except (TransferFailure, InputExhausted) as e:
        result.error = str(e)
        result.exit_code = EXIT_FAILED
    except OSError as e:
        result.error = f"Cannot write configuration: {e}"
        result.exit_code = EXIT_FAILED

    result.generated = list(session.generated)
    if result.error:
        logger.error("Configuration failed: %s", result.error)

    ctx.audit.write(AuditEntry(
        operation_id=result.operation_id,
        operation_type="configure",
        status=result.status,
        exit_code=result.exit_code,
        files=[g.path for g in result.generated],
        errors=[result.error] if result.error else [],
        context={"site_type": site_type, "template_base": fetcher.base_url},
    ))
    return result
