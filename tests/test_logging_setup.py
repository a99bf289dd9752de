import logging

from archsim.logging_setup import HANDLER_NAME, LOG_FORMAT, setup_logging


def test_setup_logging_installs_one_handler():
    setup_logging("DEBUG")
    setup_logging("WARNING")
    root = logging.getLogger()
    ours = [handler for handler in root.handlers if handler.get_name() == HANDLER_NAME]
    assert len(ours) == 1
    assert isinstance(ours[0].formatter, logging.Formatter)
    assert root.level == logging.WARNING


def test_setup_logging_ignores_other_handlers_with_same_format():
    root = logging.getLogger()
    foreign = logging.StreamHandler()
    foreign.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(foreign)
    try:
        setup_logging("INFO")
        assert any(handler.get_name() == HANDLER_NAME for handler in root.handlers)
    finally:
        root.removeHandler(foreign)
