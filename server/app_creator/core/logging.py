import logging
import sys


class SessionFormatter(logging.Formatter):
    """Formatter that tolerates records without a session_id."""
    def format(self, record):
        if not hasattr(record, "session_id"):
            record.session_id = "-"
        return super().format(record)


def configure_logging(level: int = logging.INFO) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(SessionFormatter(
        "%(asctime)s %(levelname)s %(name)s [session_id=%(session_id)s] - %(message)s"
    ))
    logging.basicConfig(
        level=level,
        handlers=[handler],
    )
