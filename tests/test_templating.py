"""
Tests for placeholder extraction, substitution, fetching and value collection.
"""

import pytest

from dvmsetup.core.errors import FetchError, InputExhausted, TransferFailure
from dvmsetup.core.services.templating import (
    AnswersInput,
    PromptInput,
    ScriptedInput,
    TemplateFetcher,
    ValueCollector,
    display_label,
    extract,
    substitute,
)
from dvmsetup.core.services.templating.collector import EMPTY_VALUE_WARNING

# ── Placeholders ────────────────────────────────────────────────────


class TestExtract:
    def test_sorted_unique(self):
        text = "a: ${SITE_NAME}\nb: ${PEER_ID}\nc: ${SITE_NAME}\n"
        assert extract(text) == ("PEER_ID", "SITE_NAME")

    def test_none(self):
        assert extract("plain: yaml\nvalue: $HOME\n") == ()

    def test_unterminated_ignored(self):
        assert extract("x: ${OPEN\n") == ()

    def test_names_with_lowercase_and_digits(self):
        assert extract("${a1} ${B_2}") == ("B_2", "a1")

    def test_empty_braces_not_a_placeholder(self):
        assert extract("x: ${}") == ()


class TestSubstitute:
    def test_every_occurrence(self):
        text = "${A} and ${A} and ${B}"
        assert substitute(text, {"A": "1", "B": "2"}) == "1 and 1 and 2"

    def test_full_bindings_leave_nothing(self):
        text = "site: ${SITE_NAME}\nid: ${SITE_ID}\n"
        result = substitute(text, {"SITE_NAME": "x", "SITE_ID": "y"})
        assert extract(result) == ()
        assert "${" not in result

    @pytest.mark.parametrize("value", [
        "http://example.com/path",
        "a&b",
        r"back\slash",
        r"\1 group ref",
        "$dollar",
        "${OTHER}",
    ])
    def test_value_inserted_literally(self, value):
        assert substitute("v: ${X}\n", {"X": value}) == f"v: {value}\n"

    def test_value_not_rescanned(self):
        result = substitute("${A} ${B}", {"A": "${B}", "B": "b"})
        assert result == "${B} b"

    def test_unbound_left_untouched(self):
        assert substitute("${A} ${B}", {"A": "a"}) == "a ${B}"


class TestDisplayLabel:
    def test_label(self):
        assert display_label("SITE_NAME") == "site name"
        assert display_label("CC_FREQUENCY") == "cc frequency"
        assert display_label("PEER_ID") == "peer id"


# ── Fetcher ─────────────────────────────────────────────────────────


class TestTemplateFetcher:
    def test_fetch_file_url(self, template_dir):
        fetcher = TemplateFetcher(template_dir.as_uri())
        template = fetcher.fetch("configCC.yml")

        assert template.identifier == "configCC.yml"
        assert template.source_location == f"{template_dir.as_uri()}/configCC.yml"
        assert "site_name: ${SITE_NAME}" in template.raw_text

    def test_trailing_slash(self):
        fetcher = TemplateFetcher("https://example.com/templates/")
        assert fetcher.url_for("configVC.yml") == "https://example.com/templates/configVC.yml"

    def test_missing_template(self, template_dir):
        fetcher = TemplateFetcher(template_dir.as_uri())
        with pytest.raises(FetchError) as exc_info:
            fetcher.fetch("configNOPE.yml")
        assert exc_info.value.template_id == "configNOPE.yml"
        assert isinstance(exc_info.value, TransferFailure)

    def test_non_utf8(self, template_dir):
        (template_dir / "bad.yml").write_bytes(b"site: \xff\xfe\n")
        with pytest.raises(FetchError, match="UTF-8"):
            TemplateFetcher(template_dir.as_uri()).fetch("bad.yml")

    def test_transport_error(self):
        def transport(url):
            raise OSError("connection refused")

        fetcher = TemplateFetcher("https://example.com", transport=transport)
        with pytest.raises(FetchError, match="connection refused"):
            fetcher.fetch("configCC.yml")

    def test_no_caching(self):
        calls = []

        def transport(url):
            calls.append(url)
            return f"v{len(calls)}"

        fetcher = TemplateFetcher("https://example.com", transport=transport)
        assert fetcher.fetch("a.yml").raw_text == "v1"
        assert fetcher.fetch("a.yml").raw_text == "v2"


# ── Collector and input providers ───────────────────────────────────


class TestValueCollector:
    def test_strips_whitespace(self):
        collector = ValueCollector(ScriptedInput(["  TestSite  "]))
        assert collector.collect("SITE_NAME") == "TestSite"

    def test_empty_reprompts(self, caplog):
        provider = ScriptedInput(["", "   ", "TestSite"])
        collector = ValueCollector(provider)

        with caplog.at_level("WARNING"):
            assert collector.collect("SITE_NAME") == "TestSite"

        assert provider.remaining == 0
        assert caplog.text.count(EMPTY_VALUE_WARNING) == 2

    def test_exhausted_propagates(self):
        collector = ValueCollector(ScriptedInput(["", ""]))
        with pytest.raises(InputExhausted):
            collector.collect("SITE_NAME")

    def test_collect_all_sorted(self):
        asked = []

        class Recorder(ScriptedInput):
            def ask(self, placeholder, label):
                asked.append((placeholder, label))
                return super().ask(placeholder, label)

        collector = ValueCollector(Recorder(["1", "2"]))
        bindings = collector.collect_all(["SITE_NAME", "PEER_ID"])

        assert bindings == {"PEER_ID": "1", "SITE_NAME": "2"}
        assert asked == [("PEER_ID", "peer id"), ("SITE_NAME", "site name")]


class TestAnswersInput:
    def test_answers(self):
        provider = AnswersInput({"SITE_NAME": "TestSite", "SITE_ID": 7})
        collector = ValueCollector(provider)
        assert collector.collect("SITE_NAME") == "TestSite"
        assert collector.collect("SITE_ID") == "7"

    def test_same_key_asked_again(self):
        collector = ValueCollector(AnswersInput({"SITE_NAME": "TestSite"}))
        assert collector.collect("SITE_NAME") == "TestSite"
        assert collector.collect("SITE_NAME") == "TestSite"

    def test_missing_key(self):
        with pytest.raises(InputExhausted):
            ValueCollector(AnswersInput({})).collect("SITE_NAME")

    def test_blank_answer(self):
        with pytest.raises(InputExhausted):
            ValueCollector(AnswersInput({"SITE_NAME": "  ", "X": None})).collect("SITE_NAME")


class TestPromptInput:
    def test_eof_is_exhausted(self, monkeypatch):
        import click

        def fake_prompt(*args, **kwargs):
            raise click.Abort()

        monkeypatch.setattr(click, "prompt", fake_prompt)
        with pytest.raises(InputExhausted):
            PromptInput().ask("SITE_NAME", "site name")

    def test_prompt_text(self, monkeypatch):
        import click

        seen = {}

        def fake_prompt(text, **kwargs):
            seen["text"] = text
            return "TestSite"

        monkeypatch.setattr(click, "prompt", fake_prompt)
        assert PromptInput().ask("SITE_NAME", "site name") == "TestSite"
        assert seen["text"] == "Enter value for site name"
