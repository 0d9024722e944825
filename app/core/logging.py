import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_handler: logging.Handler | None = None


def configure_logging(level: str = "INFO") -> None:
    """Installs a single stream handler on the root logger; repeated calls only change the level."""
    global _handler

    root = logging.getLogger()
    root.setLevel(level)

    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(_handler)

    # SQL statements are controlled by SQL_ECHO, not by the app log level
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
