from __future__ import annotations

"""
srtsuite Web 子模块

提供基于 FastAPI 的字幕翻译 / 视频转写 JSON API。
"""

from .app import app, create_app, main

__all__ = ["app", "create_app", "main"]
