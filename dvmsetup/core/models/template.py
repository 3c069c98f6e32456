"""
Template and generated-file models — used by the config session.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Template(BaseModel):
    """A configuration template as fetched. Never mutated after fetch.

    Attributes:
        identifier:      Template name, e.g. ``configCC.yml``.
        source_location: URL it was fetched from.
        raw_text:        Template text with ``${NAME}`` placeholders intact.
    """

    model_config = ConfigDict(frozen=True)

    identifier: str
    source_location: str
    raw_text: str


class GeneratedFile(BaseModel):
    """A configuration file written by a session.

    Attributes:
        template_id:  Template it was generated from.
        path:         Final path on disk.
        placeholders: Placeholder names that were substituted.
    """

    template_id: str
    path: str
    placeholders: list[str] = Field(default_factory=list)
