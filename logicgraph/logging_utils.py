import logging

from logicgraph.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] - %(message)s"
TRUNCATION_MARK = " …(truncated)"


class OneLineFormatter(logging.Formatter):
    """
    Fold a record, traceback included, onto a single line and cap its length
    at ``max_len`` characters (0 means no cap).
    """

    def __init__(self, fmt=None, datefmt=None, max_len: int = 0):
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.max_len = max_len

    def format(self, record: logging.LogRecord) -> str:
        line = " ".join(super().format(record).split())
        if 0 < self.max_len < len(line):
            line = line[: self.max_len] + TRUNCATION_MARK
        return line


def setup_logging(settings: Settings | None = None) -> None:
    """Configure the root logger once; later calls only update its level."""
    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        level = logging.WARNING

    root = logging.getLogger()
    root.setLevel(level)
    if root.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(OneLineFormatter(LOG_FORMAT, datefmt="%H:%M:%S", max_len=settings.log_max_len))
    root.addHandler(handler)
