from __future__ import annotations

import logging
import os
from typing import Optional


_CONFIGURED = False


def setup_logging(level: Optional[str] = None, force: bool = False) -> None:
    """
    统一配置根 logger（只执行一次）。

    - level 为日志级别名称（如 "INFO" / "DEBUG"）；
    - 未传入时读取环境变量 SRTSUITE_LOG_LEVEL，默认 INFO；
    - force=True 时允许重新配置（CLI 的 --verbose 使用）。
    """
    global _CONFIGURED
    if _CONFIGURED and not force:
        return

    level_name = (level or os.getenv("SRTSUITE_LOG_LEVEL") or "INFO").upper()
    log_level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        force=force,
    )
    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
