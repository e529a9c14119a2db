from __future__ import annotations

import os
import re
import shutil
from pathlib import Path

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse, JSONResponse

from srtsuite.config import MODE_TRANSCRIBE, MODE_TRANSLATE, SrtSuiteConfig
from srtsuite.env import load_dotenv_if_present
from srtsuite.errors import TranscriptionError
from srtsuite.logging_utils import get_logger, setup_logging
from srtsuite.options import DEFAULT_LANGUAGE, DEFAULT_STYLE, Language, TranslationStyle
from .dependencies import (
    UploadTooLargeError,
    cleanup_old_jobs,
    create_job_dir,
    get_web_jobs_root,
    load_job_meta,
    run_transcription_for_web,
    run_translation_for_web,
    save_upload,
    write_job_meta,
)


logger = get_logger(__name__)

MEDIA_EXTENSIONS = {
    ".wav",
    ".mp3",
    ".flac",
    ".m4a",
    ".ogg",
    ".opus",
    ".mp4",
    ".mkv",
    ".mov",
    ".avi",
    ".webm",
    ".m4v",
}

_JOB_ID_RE = re.compile(r"^[0-9a-f]{8}$")


def _parse_option(parser, value: str):
    try:
        return parser(value)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _store_upload(file: UploadFile) -> tuple[str, Path, Path]:
    job_id, job_dir = create_job_dir()
    input_path = job_dir / Path(file.filename or "upload").name
    try:
        save_upload(file.file, input_path)
    except UploadTooLargeError as exc:
        shutil.rmtree(job_dir, ignore_errors=True)
        raise HTTPException(status_code=413, detail=str(exc)) from exc
    return job_id, job_dir, input_path


def create_app() -> FastAPI:
    """
    创建并配置 FastAPI 应用。

    - 加载 .env 环境变量；
    - 注册健康检查、翻译、转写与下载路由。
    """
    load_dotenv_if_present()
    setup_logging()

    app = FastAPI(
        title="srtsuite Web",
        description="Translate SRT subtitles and transcribe videos with Gemini.",
    )

    # 启动时尝试清理一次过期任务目录
    cleanup_old_jobs()

    @app.get("/health", response_class=JSONResponse)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/options", response_class=JSONResponse)
    async def options() -> dict[str, object]:
        return {
            "languages": Language.choices(),
            "styles": TranslationStyle.choices(),
            "default_language": DEFAULT_LANGUAGE.value,
            "default_style": DEFAULT_STYLE.value,
        }

    @app.post("/api/translate", response_class=JSONResponse)
    async def translate_api(
        request: Request,
        file: UploadFile = File(...),
        language: str = Form(DEFAULT_LANGUAGE.value),
        style: str = Form(DEFAULT_STYLE.value),
    ) -> JSONResponse:
        """
        上传 SRT 文件并逐块翻译，返回原文/译文字幕块与下载链接。
        """
        if not file.filename:
            raise HTTPException(status_code=400, detail="Please upload an SRT file first.")
        if not file.filename.lower().endswith(".srt"):
            raise HTTPException(
                status_code=400,
                detail="Please upload a valid .srt file for translation.",
            )
        language_value = _parse_option(Language.parse, language)
        style_value = _parse_option(TranslationStyle.parse, style)

        cleanup_old_jobs()
        job_id, job_dir, input_path = _store_upload(file)

        try:
            config = SrtSuiteConfig.from_paths(
                input_path=input_path,
                mode=MODE_TRANSLATE,
                language=language_value,
                style=style_value,
            )
            result = await run_in_threadpool(run_translation_for_web, config)
            write_job_meta(job_id, job_dir, file.filename, config)
        except Exception as exc:
            logger.exception("翻译任务 %s 失败", job_id)
            return JSONResponse(
                {
                    "error": "An error occurred during translation.",
                    "detail": str(exc),
                    "job_id": job_id,
                },
                status_code=500,
            )

        return JSONResponse(
            {
                "job_id": job_id,
                "input_name": file.filename,
                "language": config.language.value,
                "style": config.style.value,
                "total_count": len(result.translated),
                "original": [block.to_dict() for block in result.original],
                "translated": [block.to_dict() for block in result.translated],
                "srt": result.srt_text,
                "download_url": str(request.url_for("download_file", job_id=job_id)),
            }
        )

    @app.post("/api/transcribe", response_class=JSONResponse)
    async def transcribe_api(
        request: Request,
        file: UploadFile = File(...),
        language: str = Form(DEFAULT_LANGUAGE.value),
    ) -> JSONResponse:
        """
        上传视频/音频文件，提取音频并转写为 SRT。
        """
        if not file.filename:
            raise HTTPException(status_code=400, detail="Please upload a video file first.")
        content_type = file.content_type or ""
        ext = Path(file.filename).suffix.lower()
        if not (
            content_type.startswith("video/")
            or content_type.startswith("audio/")
            or ext in MEDIA_EXTENSIONS
        ):
            raise HTTPException(
                status_code=400,
                detail="Please upload a valid video file for transcription.",
            )
        language_value = _parse_option(Language.parse, language)

        cleanup_old_jobs()
        job_id, job_dir, input_path = _store_upload(file)

        try:
            config = SrtSuiteConfig.from_paths(
                input_path=input_path,
                mode=MODE_TRANSCRIBE,
                language=language_value,
            )
            result = await run_in_threadpool(run_transcription_for_web, config)
            write_job_meta(job_id, job_dir, file.filename, config)
        except TranscriptionError as exc:
            logger.error("转写任务 %s 失败: %s", job_id, exc)
            return JSONResponse({"error": str(exc), "job_id": job_id}, status_code=500)
        except Exception as exc:
            logger.exception("转写任务 %s 失败", job_id)
            return JSONResponse(
                {
                    "error": "An error occurred during transcription.",
                    "detail": str(exc),
                    "job_id": job_id,
                },
                status_code=500,
            )
        finally:
            # 上传的媒体文件只在处理期间需要
            input_path.unlink(missing_ok=True)

        return JSONResponse(
            {
                "job_id": job_id,
                "input_name": file.filename,
                "language": config.language.value,
                "total_count": len(result.blocks),
                "blocks": [block.to_dict() for block in result.blocks],
                "srt": result.srt_text,
                "download_url": str(request.url_for("download_file", job_id=job_id)),
            }
        )

    @app.get("/download/{job_id}", name="download_file")
    async def download_file(job_id: str) -> FileResponse:
        """
        下载任务生成的 .srt 文件。
        """
        if not _JOB_ID_RE.match(job_id):
            raise HTTPException(status_code=404, detail="任务不存在或已被清理。")
        job_dir = get_web_jobs_root() / job_id
        meta = load_job_meta(job_dir) if job_dir.is_dir() else None
        if not meta or not meta.get("output_name"):
            raise HTTPException(status_code=404, detail="任务不存在或已被清理。")

        path = job_dir / Path(str(meta["output_name"])).name
        if not path.is_file():
            raise HTTPException(status_code=404, detail="目标文件不存在。")

        return FileResponse(
            path,
            media_type="text/plain; charset=utf-8",
            filename=path.name,
        )

    return app


# 供 uvicorn 等 ASGI 服务器直接引用
app = create_app()


def main() -> None:
    """
    本地启动 Web 服务的入口。

    可通过环境变量控制监听地址与端口：
      - SRTSUITE_WEB_HOST（默认 127.0.0.1）
      - SRTSUITE_WEB_PORT（默认 8000）
    """
    import uvicorn

    host = os.getenv("SRTSUITE_WEB_HOST", "127.0.0.1")
    port_str = os.getenv("SRTSUITE_WEB_PORT", "8000")
    try:
        port = int(port_str)
    except ValueError:
        port = 8000

    uvicorn.run("srtsuite.web.app:app", host=host, port=port, reload=False)
