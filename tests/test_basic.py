import importlib
import logging


def test_package_importable():
    """Ensure the netmap package can be imported without side-effects."""
    pkg = importlib.import_module("netmap")
    assert hasattr(pkg, "logger")
    assert callable(pkg.plot_network)


def test_public_api_resolves():
    pkg = importlib.import_module("netmap")
    for name in pkg.__all__:
        assert hasattr(pkg, name), name


def test_library_logger_has_no_console_handler():
    pkg = importlib.import_module("netmap")
    assert pkg.logger.name == "netmap"
    assert all(isinstance(h, logging.NullHandler) for h in pkg.logger.handlers)


def test_error_hierarchy():
    pkg = importlib.import_module("netmap")
    assert issubclass(pkg.InvalidInputType, TypeError)
    assert issubclass(pkg.NonUniqueQuantization, ValueError)
    assert issubclass(pkg.AttributeNotFound, KeyError)
    for exc in (pkg.InvalidInputType, pkg.NonUniqueQuantization, pkg.AttributeNotFound):
        assert issubclass(exc, pkg.NetmapError)


def test_rich_console_logging(monkeypatch):
    from rich.logging import RichHandler

    from netmap import logging_config

    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)
    pkg = importlib.import_module("netmap")
    level = pkg.logger.level
    try:
        logging_config.configure("debug")
        assert any(isinstance(h, RichHandler) for h in root.handlers)
        assert pkg.logger.level == logging.DEBUG
    finally:
        pkg.logger.setLevel(level)


def test_unknown_env_log_level_falls_back_to_warning(monkeypatch):
    pkg = importlib.import_module("netmap")
    level = pkg.logger.level
    monkeypatch.setenv("NETMAP_LOG_LEVEL", "chatty")
    try:
        importlib.reload(pkg)
        assert pkg.LOG_LEVEL == "WARNING"
        assert pkg.logger.level == logging.WARNING
    finally:
        pkg.logger.setLevel(level)
