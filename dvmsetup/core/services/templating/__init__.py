"""
Templating — turn remote ``${NAME}`` templates into site config files.

    fetcher       TemplateFetcher: download a template by identifier
    placeholders  extract / substitute / display_label
    collector     ValueCollector and the input providers it asks
    session       ConfigSession: the fetch → collect → write loop
"""

from dvmsetup.core.services.templating.collector import (
    AnswersInput,
    InputProvider,
    PromptInput,
    ScriptedInput,
    ValueCollector,
)
from dvmsetup.core.services.templating.fetcher import TemplateFetcher
from dvmsetup.core.services.templating.placeholders import (
    display_label,
    extract,
    substitute,
)
from dvmsetup.core.services.templating.session import ConfigSession

__all__ = [
    "AnswersInput",
    "ConfigSession",
    "InputProvider",
    "PromptInput",
    "ScriptedInput",
    "TemplateFetcher",
    "ValueCollector",
    "display_label",
    "extract",
    "substitute",
]
