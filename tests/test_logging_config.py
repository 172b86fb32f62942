import logging
import os

import pytest

from linked_source.logging_config import setup_logging

pytestmark = pytest.mark.usefixtures("restore_root_logging")


def test_setup_logging_writes_log_file(tmp_path):
    setup_logging()
    log_dir = os.environ["LINKED_SOURCE_LOG_DIR"]
    logging.getLogger("linked_source.test").warning("hello from test")
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert "hello from test" in (tmp_path / "logs" / "app.log").read_text(encoding="utf-8")
    assert log_dir == str(tmp_path / "logs")


def test_debug_override_for_listed_modules(monkeypatch):
    monkeypatch.setenv("LINKED_SOURCE_DEBUG_MODULES", "linked_source.core.walker, linked_source.core.uri")
    setup_logging()
    assert logging.getLogger("linked_source.core.walker").level == logging.DEBUG
    assert logging.getLogger("linked_source.core.uri").level == logging.DEBUG


def test_invalid_logging_config_falls_back(isolated_config, capsys):
    from linked_source.config import ConfigManager

    (isolated_config / "logging.yml").write_text("version: 1\nhandlers:\n  bad:\n    class: no.such.Handler\n", encoding="utf-8")
    ConfigManager.reset()
    setup_logging()
    assert "Error loading logging config" in capsys.readouterr().out


def test_index_switch_traces_skipped_targets(tmp_path, monkeypatch):
    import lxml.html

    from linked_source.core.index import IdentifierIndex

    monkeypatch.setenv("LINKED_SOURCE_DEBUG_INDEX", "1")
    setup_logging()
    index_logger = logging.getLogger("linked_source.core.index")
    assert index_logger.level == logging.DEBUG
    # the DEBUG file handler on the root already receives the records
    assert index_logger.handlers == []

    tree = lxml.html.document_fromstring('<div><a href="plain.html">x</a></div>').getroottree()
    assert len(IdentifierIndex.build(tree).skipped_targets) == 1
    for handler in logging.getLogger().handlers:
        handler.flush()
    log_text = (tmp_path / "logs" / "app.log").read_text(encoding="utf-8")
    assert "Skipping link target" in log_text
    assert "Debug logging enabled for: linked_source.core.index, linked_source.core.uri" in log_text


def test_navigation_switch_leaves_index_logger_alone(monkeypatch):
    monkeypatch.setenv("LINKED_SOURCE_DEBUG_NAVIGATION", "yes")
    setup_logging()
    assert logging.getLogger("linked_source.core.services.navigation_service").level == logging.DEBUG
    assert logging.getLogger("linked_source.adapters.scroller").level == logging.DEBUG
    assert logging.getLogger("linked_source.core.index").level == logging.INFO
