"""
Unit tests for kazi/controllers/guards.py, kazi/i18n.py and
kazi/common/logger.py
"""

import logging

import pytest

from kazi.common.logger import LOG_FORMAT, get_logger, setup_logging
from kazi.controllers.guards import ActionBusyError, ActionGuard
from kazi.i18n import MESSAGES, translate
from kazi.models import Locale


class TestActionGuard:
    """Tests for ActionGuard."""

    def test_hold_marks_action_busy(self):
        guard = ActionGuard()

        with guard.hold("delete_job"):
            assert guard.is_busy("delete_job")
            assert guard.busy_actions == {"delete_job"}

        assert not guard.is_busy("delete_job")

    def test_reentry_rejected(self):
        guard = ActionGuard()

        with guard.hold("post_job"):
            with pytest.raises(ActionBusyError) as exc_info:
                with guard.hold("post_job"):
                    pass

        assert exc_info.value.action == "post_job"

    def test_different_actions_independent(self):
        guard = ActionGuard()

        with guard.hold("post_job"), guard.hold("delete_job"):
            assert guard.busy_actions == {"post_job", "delete_job"}

    def test_released_after_exception(self):
        guard = ActionGuard()

        with pytest.raises(RuntimeError):
            with guard.hold("update_profile"):
                raise RuntimeError("boom")

        assert not guard.is_busy("update_profile")


class TestTranslate:
    """Tests for translate()."""

    def test_every_message_has_both_languages(self):
        for key, entry in MESSAGES.items():
            assert set(entry) == {"en", "sw"}, key

    def test_locale_selection(self):
        assert translate("login", Locale.EN) != translate("login", Locale.SW)
        assert translate("login", "en") == translate("login", Locale.EN)

    def test_defaults_to_swahili(self):
        assert translate("login") == translate("login", "sw")
        assert translate("login", "fr") == translate("login", "sw")

    def test_unknown_key_returned_as_is(self):
        assert translate("no_such_key", "en") == "no_such_key"

    def test_parameters_interpolated(self):
        text = translate("share_text", "en", title="Driver", location="Nairobi",
                         description="Deliver...", phone="2547")
        assert "Driver" in text and "Nairobi" in text


class TestClientLogger:
    """Tests for the client-tagged logger."""

    def test_prefixes_client_id(self, caplog):
        log = get_logger("kazi.test", "abcdef1234567890")

        with caplog.at_level(logging.INFO, logger="kazi.test"):
            log.info("hello")

        assert "[client:abcdef12] hello" in caplog.text

    def test_no_prefix_without_client(self, caplog):
        log = get_logger("kazi.test")

        with caplog.at_level(logging.INFO, logger="kazi.test"):
            log.info("plain")

        assert "plain" in caplog.text
        assert "[client:" not in caplog.text


class TestSetupLogging:
    """Tests for setup_logging()."""

    @pytest.fixture
    def root_logger(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        yield root
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

    def test_single_stdout_handler(self, root_logger):
        setup_logging("debug")
        setup_logging("warning")

        assert len(root_logger.handlers) == 1
        handler = root_logger.handlers[0]
        assert handler.formatter._fmt == LOG_FORMAT
        assert root_logger.level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, root_logger):
        setup_logging("chatty")

        assert root_logger.level == logging.INFO
