import logging
import sys
from typing import Iterable, Optional

from mallbridge.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# 短链解析 / 平台接口 / 翻译都走 requests，连接池日志在 INFO 下太吵
NOISY_LOGGERS = ("urllib3", "urllib3.connectionpool", "charset_normalizer")


def configure_logging(level: Optional[str] = None, quiet: Iterable[str] = NOISY_LOGGERS) -> logging.Logger:
    """
    只装一次 stdout handler；宿主（Web 框架 / pytest）已经配过 handler 时只调整级别。
    级别默认取 LOG_LEVEL；非 DEBUG 时把 HTTP 库的日志压到 WARNING。
    """
    resolved = (level or settings.LOG_LEVEL or "INFO").upper()
    root = logging.getLogger()

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(resolved)

    if resolved != "DEBUG":
        for name in quiet:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.captureWarnings(True)
    return logging.getLogger("mallbridge")
