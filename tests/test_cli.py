"""Tests for the command-line entry point."""

import logging
import pytest
from pathlib import Path

from sub_translator import cli
from sub_translator.browser_client import TranslationProvider
from sub_translator.config import TranslatorConfig
from sub_translator.parser import load_srt


class UpperProvider(TranslationProvider):

    def __init__(self):
        self.opened = False
        self.closed = False

    def open(self):
        self.opened = True

    def close(self):
        self.closed = True

    def translate(self, text, source_lang, target_lang):
        return text.upper()


@pytest.fixture
def provider(monkeypatch):
    instance = UpperProvider()
    monkeypatch.setattr(cli, "create_provider", lambda config: instance)
    monkeypatch.setenv("SUBTRANSLATOR_THROTTLE_SECONDS", "0")
    return instance


def run_main(argv):
    with pytest.raises(SystemExit) as exc:
        cli.main(argv)
    return exc.value.code


class TestParseArguments:

    def test_defaults(self):
        args = cli.parse_arguments(["movie.srt"])
        assert args.input_path == "movie.srt"
        assert args.headless is None
        assert not args.abort_on_error

    def test_flags_reach_config(self, monkeypatch):
        monkeypatch.delenv("SUBTRANSLATOR_HEADLESS", raising=False)
        args = cli.parse_arguments(["movie.srt", "--headless", "--abort-on-error", "--verify-resume"])
        config = TranslatorConfig.from_args(args)
        assert config.headless
        assert config.abort_on_error
        assert config.verify_resume

    def test_missing_argument(self):
        with pytest.raises(SystemExit):
            cli.parse_arguments([])


class TestMain:

    def test_translates_file(self, tmp_path, provider):
        source = tmp_path / "movie.srt"
        source.write_text("1\n00:00:01,000 --> 00:00:02,000\nHello\n\n", encoding="utf-8")

        assert run_main([str(source)]) == 0

        assert load_srt(tmp_path / "movie-pt.srt")[0].lines == ["HELLO"]
        assert provider.opened and provider.closed

    def test_logs_provider_name(self, tmp_path, provider, caplog):
        source = tmp_path / "movie.srt"
        source.write_text("1\n00:00:01,000 --> 00:00:02,000\nHello\n\n", encoding="utf-8")

        with caplog.at_level(logging.INFO, logger="sub_translator.cli"):
            assert run_main([str(source)]) == 0

        assert "with UpperProvider" in caplog.text

    def test_nonexistent_file(self, tmp_path, provider, capsys):
        assert run_main([str(tmp_path / "missing.srt")]) == 1
        assert "usage:" in capsys.readouterr().out
        assert not provider.opened

    def test_directory_with_failure_exits_nonzero(self, tmp_path, provider):
        (tmp_path / "bad.srt").write_text("garbage\n", encoding="utf-8")
        assert run_main([str(tmp_path)]) == 1
        assert provider.closed
