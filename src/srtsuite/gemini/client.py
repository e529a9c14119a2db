from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import requests

from srtsuite.errors import ConfigError, GeminiError
from srtsuite.logging_utils import get_logger


logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.5-flash"


def _first_env(*names: str) -> Optional[str]:
    for name in names:
        value = os.getenv(name, "").strip()
        if value:
            return value
    return None


class GeminiClient:
    """
    Gemini generateContent REST 接口的最小封装。

    环境变量约定（来自 .env 或系统环境）：
      - SRTSUITE_GEMINI_API_KEY   # 必填，也兼容 GEMINI_API_KEY / API_KEY
      - SRTSUITE_GEMINI_MODEL     # 可选，默认 gemini-2.5-flash
      - SRTSUITE_GEMINI_URL       # 可选，API 根地址，可指向自建代理
      - SRTSUITE_GEMINI_TIMEOUT   # 可选，单次请求超时（秒），默认 300
      - SRTSUITE_HTTP_PROXY / SRTSUITE_HTTPS_PROXY
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        api_key = api_key or _first_env("SRTSUITE_GEMINI_API_KEY", "GEMINI_API_KEY", "API_KEY")
        if not api_key:
            raise ConfigError(
                "GeminiClient requires SRTSUITE_GEMINI_API_KEY (or GEMINI_API_KEY) to be set."
            )
        self.api_key = api_key
        self.model = model or _first_env("SRTSUITE_GEMINI_MODEL") or DEFAULT_MODEL
        self.base_url = (base_url or _first_env("SRTSUITE_GEMINI_URL") or DEFAULT_BASE_URL).rstrip("/")

        if timeout is None:
            try:
                timeout = float(os.getenv("SRTSUITE_GEMINI_TIMEOUT", "300") or "300")
            except ValueError:
                timeout = 300.0
        self.timeout = timeout

        http_proxy = os.getenv("SRTSUITE_HTTP_PROXY")
        https_proxy = os.getenv("SRTSUITE_HTTPS_PROXY")
        proxies: dict[str, str] = {}
        if http_proxy:
            proxies["http"] = http_proxy
        if https_proxy:
            proxies["https"] = https_proxy
        self.proxies = proxies or None

    def _endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    @staticmethod
    def _extract_text(data: Dict[str, Any]) -> str:
        candidates = data.get("candidates") or []
        if not isinstance(candidates, list) or not candidates:
            feedback = data.get("promptFeedback")
            raise GeminiError(f"Gemini 响应中没有候选结果: {feedback!r}")
        first = candidates[0]
        if not isinstance(first, dict):
            raise GeminiError(f"Gemini 候选结果结构异常: {first!r}")
        content = first.get("content") or {}
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            parts = []
        texts = [str(part["text"]) for part in parts if isinstance(part, dict) and "text" in part]
        if not texts:
            reason = first.get("finishReason")
            raise GeminiError(f"Gemini 响应中没有文本内容 (finishReason={reason})")
        return "".join(texts)

    def generate(self, parts: List[Dict[str, Any]]) -> str:
        """
        发送一次 generateContent 请求，返回首个候选结果拼接后的文本。
        """
        payload = {"contents": [{"parts": parts}]}
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
        }
        logger.debug("POST %s (%d parts)", self._endpoint(), len(parts))
        try:
            resp = requests.post(
                self._endpoint(),
                json=payload,
                headers=headers,
                timeout=self.timeout,
                proxies=self.proxies,
            )
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as exc:
            raise GeminiError(f"Gemini 请求失败: {exc}") from exc
        except ValueError as exc:
            raise GeminiError(f"Gemini 返回了无法解析的 JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise GeminiError(f"Gemini 返回了意外的响应结构: {type(data).__name__}")
        return self._extract_text(data)

    def generate_text(self, prompt: str) -> str:
        return self.generate([{"text": prompt}])

    def generate_with_audio(
        self,
        audio_base64: str,
        prompt: str,
        mime_type: str = "audio/wav",
    ) -> str:
        parts = [
            {"inline_data": {"mime_type": mime_type, "data": audio_base64}},
            {"text": prompt},
        ]
        return self.generate(parts)
