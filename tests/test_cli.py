import logging

import pytest

from stock_digest import cli
from stock_digest.config import DigestSettings
from stock_digest.exceptions import ConfigurationError, DeliveryError
from stock_digest.push import ConsolePusher, LinePusher
from stock_digest.summarizers import NullSummarizer, OpenAISummarizer

from conftest import RecordingPusher, make_item


def test_dry_run_needs_no_recipient():
    pipeline = cli.build_pipeline(DigestSettings.from_env({}), dry_run=True, summarize=False)
    assert isinstance(pipeline.pusher, ConsolePusher)
    assert isinstance(pipeline.summarizer, NullSummarizer)


def test_real_run_resolves_recipient():
    settings = DigestSettings.from_env({"LINE_CHANNEL_ACCESS_TOKEN": "tok", "LINE_GROUP_ID": "C1"})
    pipeline = cli.build_pipeline(settings, summarize=False)
    assert isinstance(pipeline.pusher, LinePusher)
    assert pipeline.recipient_id == "C1"


def test_conflicting_recipients_fail():
    settings = DigestSettings.from_env({"LINE_CHANNEL_ACCESS_TOKEN": "tok", "LINE_USER_ID": "U1", "LINE_ROOM_ID": "R1"})
    with pytest.raises(ConfigurationError):
        cli.build_pipeline(settings, summarize=False)


def test_main_returns_1_on_configuration_error(monkeypatch):
    monkeypatch.setattr(cli, "load_dotenv", lambda: None)
    monkeypatch.setenv("DIGEST_MAX_CHUNK_LEN", "-1")
    assert cli.main(["--dry-run", "--no-summarize"]) == 1


def _handler_env(monkeypatch):
    monkeypatch.setattr(cli, "load_dotenv", lambda: None)
    monkeypatch.setenv("DIGEST_SUBJECTS", "A=Company A;B=Company B")
    monkeypatch.setenv("DIGEST_SUMMARIZER", "none")
    monkeypatch.setenv("LINE_CHANNEL_ACCESS_TOKEN", "tok")
    monkeypatch.setenv("LINE_USER_ID", "U1")
    for name in ("LINE_GROUP_ID", "LINE_ROOM_ID", "DIGEST_MAX_CHUNK_LEN", "DIGEST_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    real_build = cli.build_pipeline

    def build(settings, **kwargs):
        pipeline = real_build(settings, **kwargs)
        pipeline._fetch = lambda query, max_items: [make_item(f"{query} headline", 1)]
        return pipeline

    monkeypatch.setattr(cli, "build_pipeline", build)


def test_handler_delivers_digest(monkeypatch):
    _handler_env(monkeypatch)
    pusher = RecordingPusher()
    monkeypatch.setattr(cli, "LinePusher", lambda token: pusher)

    assert cli.handler({}, None) == {"ok": True, "chunks": 1}
    recipient, text = pusher.calls[0]
    assert recipient == "U1"
    assert text.startswith("Daily Stock News Digest - ")
    assert "A\n- Mon, 14 Oct 2024 | Company A headline |" in text


def test_handler_propagates_delivery_error(monkeypatch):
    _handler_env(monkeypatch)
    monkeypatch.setattr(cli, "LinePusher", lambda token: RecordingPusher(fail_on={1}))

    with pytest.raises(DeliveryError) as exc:
        cli.handler()
    assert exc.value.chunk_index == 1


def test_summarizer_key_comes_from_settings(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    settings = DigestSettings.from_env({"OPENAI_API_KEY": "sk-test", "DIGEST_SUMMARIZER": "openai"})
    pipeline = cli.build_pipeline(settings, dry_run=True)
    assert isinstance(pipeline.summarizer, OpenAISummarizer)


def test_configure_logging_sets_levels():
    cli.configure_logging("debug")
    try:
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("urllib3").level == logging.WARNING
    finally:
        logging.getLogger().setLevel(logging.WARNING)


def test_log_level_flag_rejects_unknown_level():
    with pytest.raises(SystemExit):
        cli.main(["--log-level", "chatty"])
