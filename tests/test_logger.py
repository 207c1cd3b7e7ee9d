import logging

from cua_remote.utils.logger import get_logger, set_level


def test_set_level_relevels_package_loggers_only():
    ours = get_logger("cua_remote.test_logger", level="INFO")
    other = logging.getLogger("somebody_else")
    other.setLevel(logging.WARNING)

    set_level("debug")

    assert ours.level == logging.DEBUG
    assert all(h.level == logging.DEBUG for h in ours.handlers)
    assert other.level == logging.WARNING
    set_level("INFO")
