from __future__ import annotations

"""
Web 层与核心 Pipeline 之间的集成点：任务目录管理、上传落地与元信息读写。
"""

from typing import Any, BinaryIO, Dict, Tuple
from pathlib import Path
import os
import uuid
import shutil
import time
import json
from datetime import datetime

from srtsuite.config import SrtSuiteConfig
from srtsuite.logging_utils import get_logger
from srtsuite.pipeline import SrtSuitePipeline, TranscriptionResult, TranslationResult


logger = get_logger(__name__)


class UploadTooLargeError(Exception):
    def __init__(self, max_mb: int) -> None:
        super().__init__(f"上传文件过大，超过限制 {max_mb} MB。")
        self.max_mb = max_mb


def run_translation_for_web(config: SrtSuiteConfig) -> TranslationResult:
    return SrtSuitePipeline(config).run_translation()


def run_transcription_for_web(config: SrtSuiteConfig) -> TranscriptionResult:
    return SrtSuitePipeline(config).run_transcription()


def get_web_jobs_root() -> Path:
    """
    获取 Web 任务工作目录根路径。

    默认使用当前工作目录下的 exports/web_jobs，可通过
    SRTSUITE_WEB_JOBS_DIR 环境变量覆盖。
    """
    root_env = os.getenv("SRTSUITE_WEB_JOBS_DIR")
    if root_env:
        root = Path(root_env).expanduser().resolve()
    else:
        root = Path.cwd() / "exports" / "web_jobs"
    root.mkdir(parents=True, exist_ok=True)
    return root


def get_max_upload_mb() -> int:
    max_mb_env = os.getenv("SRTSUITE_WEB_MAX_UPLOAD_MB", "1024")
    try:
        return int(max_mb_env)
    except ValueError:
        return 1024


def create_job_dir() -> Tuple[str, Path]:
    jobs_root = get_web_jobs_root()
    job_id = uuid.uuid4().hex[:8]
    job_dir = jobs_root / job_id
    job_dir.mkdir(parents=True, exist_ok=False)
    return job_id, job_dir


def save_upload(source: BinaryIO, dest: Path, max_mb: int | None = None) -> int:
    """
    分块将上传内容写入 dest，超过大小限制时抛出 UploadTooLargeError。
    """
    if max_mb is None:
        max_mb = get_max_upload_mb()
    max_bytes = max_mb * 1024 * 1024
    copied = 0
    chunk_size = 1024 * 1024
    with dest.open("wb") as f_out:
        while True:
            chunk = source.read(chunk_size)
            if not chunk:
                break
            copied += len(chunk)
            if copied > max_bytes:
                raise UploadTooLargeError(max_mb)
            f_out.write(chunk)
    return copied


def cleanup_old_jobs(ttl_hours: float | None = None) -> None:
    """
    清理超过 TTL 的历史任务目录。

    - 默认 TTL 通过环境变量 SRTSUITE_WEB_JOBS_TTL_HOURS 控制（小时，默认 12）；
    - 设置为 0 或负数时不执行清理。
    """
    if ttl_hours is None:
        ttl_env = os.getenv("SRTSUITE_WEB_JOBS_TTL_HOURS", "12")
        try:
            ttl_hours = float(ttl_env)
        except ValueError:
            ttl_hours = 12.0

    if ttl_hours <= 0:
        return

    jobs_root = get_web_jobs_root()
    now = time.time()
    ttl_seconds = ttl_hours * 3600.0

    for entry in jobs_root.iterdir():
        if not entry.is_dir():
            continue
        try:
            mtime = entry.stat().st_mtime
        except OSError:
            continue
        if now - mtime > ttl_seconds:
            logger.info("清理过期任务目录: %s", entry.name)
            shutil.rmtree(entry, ignore_errors=True)


def write_job_meta(
    job_id: str,
    job_dir: Path,
    input_name: str,
    config: SrtSuiteConfig,
) -> None:
    """
    将任务元信息写入 job.json，下载接口据此找到结果文件。
    """
    data: Dict[str, Any] = {
        "job_id": job_id,
        "input_name": input_name,
        "created_at": datetime.now().isoformat(timespec="seconds"),
        "mode": config.mode,
        "language": config.language.value,
        "style": config.style.value,
        "output_name": config.output_srt_path.name if config.output_srt_path else None,
    }
    meta_path = job_dir / "job.json"
    meta_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")


def load_job_meta(job_dir: Path) -> Dict[str, Any] | None:
    """
    从任务目录读取 job.json，如果不存在或损坏则返回 None。
    """
    meta_path = job_dir / "job.json"
    if not meta_path.is_file():
        return None
    try:
        data = json.loads(meta_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    return data if isinstance(data, dict) else None
