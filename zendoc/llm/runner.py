"""Chat-completion client used to draft per-file documentation."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ..config import LLMConfig


@dataclass
class LLMRequest:
    """A single prompt sent to the documentation model."""

    prompt: str
    system: Optional[str]
    model: str
    temperature: Optional[float]
    max_tokens: Optional[int]
    base_url: str
    api_key: Optional[str]
    request_timeout: Optional[float]


class LLMRunner:
    """Sends prompts to an OpenAI-compatible ``/chat/completions`` endpoint.

    The default endpoint is Gemini's OpenAI-compatible API. Tests and
    alternative transports pass ``runner`` to replace the HTTP call.
    """

    PROBE_PROMPT = "Say 'Hello, AI is working!'"

    def __init__(
        self,
        model: str,
        *,
        base_url: str,
        api_key: Optional[str] = None,
        temperature: Optional[float] = 0.3,
        max_tokens: Optional[int] = 4000,
        request_timeout: Optional[float] = 120.0,
        runner: Callable[[LLMRequest], str] | None = None,
    ) -> None:
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.request_timeout = request_timeout
        self._runner = runner or self._http_runner

    @classmethod
    def from_config(
        cls, config: LLMConfig, *, runner: Callable[[LLMRequest], str] | None = None
    ) -> "LLMRunner":
        if runner is None and not config.api_key:
            raise RuntimeError(
                "No LLM API key configured. Set GOOGLE_GENERATIVE_AI_API_KEY in your "
                "environment or .env file, or llm.api_key in .zendoc.yml."
            )
        return cls(
            config.model,
            base_url=config.base_url,
            api_key=config.api_key,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            request_timeout=config.request_timeout,
            runner=runner,
        )

    def run(
        self,
        prompt: str,
        *,
        system: str | None = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> str:
        """Send ``prompt`` and return the stripped response text."""
        request = LLMRequest(
            prompt=prompt,
            system=system,
            model=self.model,
            temperature=self.temperature if temperature is None else temperature,
            max_tokens=self.max_tokens if max_tokens is None else max_tokens,
            base_url=self.base_url,
            api_key=self.api_key,
            request_timeout=self.request_timeout,
        )
        return self._runner(request)

    def check(self) -> None:
        """Probe the endpoint once; raises RuntimeError when it is unusable."""
        try:
            self.run(self.PROBE_PROMPT, max_tokens=50)
        except RuntimeError as exc:
            raise RuntimeError(f"LLM connection check failed: {exc}") from exc

    @staticmethod
    def _http_runner(request: LLMRequest) -> str:
        endpoint = f"{request.base_url}/chat/completions"
        payload: dict[str, object] = {
            "model": request.model,
            "messages": LLMRunner._build_messages(request.system, request.prompt),
        }
        if request.temperature is not None:
            payload["temperature"] = request.temperature
        if request.max_tokens is not None:
            payload["max_tokens"] = request.max_tokens

        headers = {"Content-Type": "application/json"}
        if request.api_key:
            headers["Authorization"] = f"Bearer {request.api_key}"

        http_request = Request(
            endpoint,
            data=json.dumps(payload).encode("utf-8"),
            headers=headers,
            method="POST",
        )
        try:
            with urlopen(http_request, timeout=request.request_timeout or 120.0) as response:
                raw = response.read()
        except HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            raise RuntimeError(
                f"LLM request failed with status {exc.code}: {detail.strip() or exc.reason}"
            ) from exc
        except URLError as exc:
            raise RuntimeError(f"LLM request failed: {exc.reason}") from exc

        try:
            response_payload = json.loads(raw.decode("utf-8"))
        except json.JSONDecodeError as exc:
            raise RuntimeError("LLM endpoint returned invalid JSON") from exc

        content = LLMRunner._extract_content(response_payload)
        if not content:
            raise RuntimeError("LLM endpoint returned an empty response")
        return content.strip()

    @staticmethod
    def _build_messages(system: str | None, prompt: str) -> list[dict[str, str]]:
        messages: list[dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return messages

    @staticmethod
    def _extract_content(payload: object) -> str:
        if not isinstance(payload, dict):
            return ""
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            return ""
        first = choices[0]
        if not isinstance(first, dict):
            return ""
        message = first.get("message")
        if isinstance(message, dict):
            content = message.get("content")
            if isinstance(content, str):
                return content
        text = first.get("text")
        return text if isinstance(text, str) else ""


__all__ = ["LLMRequest", "LLMRunner"]
