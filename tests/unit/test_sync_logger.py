"""Tests for logging setup and the Postmark alert handler."""

import logging

import colorlog
import requests
from pytest_mock import MockerFixture

from src.logger import PostmarkHandler, build_handlers, setup_logging


def make_record(message: str) -> logging.LogRecord:
    return logging.LogRecord("src.schedule_sync", logging.ERROR, __file__, 1, message, None, None)


class TestBuildHandlers:
    def test_console_handler_only_by_default(self, monkeypatch):
        for var in ("SYNC_LOG_FILE", "POSTMARK_API_TOKEN"):
            monkeypatch.delenv(var, raising=False)

        handlers = build_handlers()

        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, colorlog.ColoredFormatter)

    def test_file_and_postmark_handlers(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SYNC_LOG_FILE", str(tmp_path / "sync.log"))
        monkeypatch.setenv("POSTMARK_API_TOKEN", "token")
        monkeypatch.setenv("POSTMARK_SENDER_EMAIL", "sync@example.com")
        monkeypatch.setenv("POSTMARK_RECEIVER_EMAILS", "ops@example.com,dj@example.com")
        monkeypatch.delenv("POSTMARK_ALERT_SUBJECT", raising=False)

        handlers = build_handlers()

        postmark = [h for h in handlers if isinstance(h, PostmarkHandler)]
        assert len(handlers) == 3
        assert postmark[0].receiver_emails == ["ops@example.com", "dj@example.com"]
        assert postmark[0].level == logging.ERROR
        assert postmark[0].subject == "Schedule Sync Error Alert"
        for handler in handlers:
            handler.close()


class TestSetupLogging:
    def test_sets_level_and_keeps_existing_handlers(self, monkeypatch):
        root = logging.getLogger()
        previous_level = root.level
        monkeypatch.setenv("SYNC_LOG_LEVEL", "debug")
        root.addHandler(logging.NullHandler())
        before = list(root.handlers)

        try:
            setup_logging()

            assert root.level == logging.DEBUG
            assert root.handlers == before
        finally:
            root.removeHandler(before[-1])
            root.setLevel(previous_level)


class TestPostmarkHandler:
    def make_handler(self) -> PostmarkHandler:
        return PostmarkHandler(
            api_token="token",
            sender_email="sync@example.com",
            receiver_emails=["ops@example.com", "dj@example.com"],
            subject="Alert",
        )

    def test_emit_posts_email(self, mocker: MockerFixture):
        post = mocker.patch("src.logger.requests.post")

        self.make_handler().emit(make_record("capture failed"))

        post.assert_called_once()
        payload = post.call_args.kwargs["json"]
        assert payload["To"] == "ops@example.com,dj@example.com"
        assert payload["Subject"] == "Alert"
        assert "capture failed" in payload["TextBody"]
        assert post.call_args.kwargs["headers"]["X-Postmark-Server-Token"] == "token"

    def test_emit_failure_goes_to_handle_error(self, mocker: MockerFixture):
        mocker.patch("src.logger.requests.post", side_effect=requests.ConnectionError("down"))
        handler = self.make_handler()
        handle_error = mocker.patch.object(handler, "handleError")
        record = make_record("capture failed")

        handler.emit(record)

        handle_error.assert_called_once_with(record)
