import logging
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from core.config import settings

class ESTFormatter(logging.Formatter):
    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        # Render in the same calendar the data is keyed by (EST/EDT)
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        local = dt.astimezone(ZoneInfo(settings.timezone))
        return local.strftime(datefmt or "%Y-%m-%d %H:%M:%S %Z")

    def format(self, record: logging.LogRecord) -> str:
        # Only the module name, not the dotted feature path
        record.name = record.name.split('.')[-1]
        return super().format(record)

def setup_logging(level: int = logging.INFO) -> None:
    formatter = ESTFormatter(
        fmt="[%(levelname)s] %(asctime)s | %(name)s | %(message)s"
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    logging.getLogger("apscheduler").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
