"""Refine Prompt Use Case - Application Layer"""

import json
import logging
import random
import time
from typing import Any, Optional, Sequence

import httpx

from ...domain.entity.image import ProviderId
from ...domain.entity.log_entry import LogCategory
from ...domain.entity.provider_config import XAIConfig
from ...domain.exceptions import HttpError, ImageGenerationError, NetworkError, ParseError
from ...domain.repository.config_store import ConfigStore
from ...domain.repository.credential_store import CredentialStore
from ...domain.service.request_log import RequestLog

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = (
    "You are a helpful prompt refiner for image generation. Make the user's prompt "
    "more detailed, creative, and optimized for AI image models."
)

STYLE_SUFFIXES = (
    "in cyberpunk neon glow",
    "as a surreal dreamscape",
    "with epic fantasy vibes",
    "in high-contrast black and white",
    "like a vintage poster",
    "in vibrant watercolor",
    "with futuristic sci-fi elements",
    "as a cute cartoon illustration",
    "in realistic photographic detail",
    "with magical realism touch",
)

DEFAULT_TIMEOUT = 60.0
_BODY_PREVIEW_LIMIT = 300


def strip_fallback_suffix(prompt: str, suffixes: Sequence[str] = STYLE_SUFFIXES) -> str:
    """Remove every trailing ``", <style>"`` left by earlier fallbacks"""
    stripped = prompt
    changed = True
    while changed:
        changed = False
        tail = stripped.rstrip()
        for suffix in suffixes:
            marker = f", {suffix}"
            if tail.endswith(marker):
                stripped = tail[: -len(marker)]
                changed = True
                break
    return stripped


class RefinePromptUseCase:
    """Rewrites a prompt through a chat-completions call

    Never fails: when the call cannot produce a completion the prompt gets a
    randomly chosen style suffix instead.
    """

    def __init__(
        self,
        request_log: RequestLog,
        credential_store: Optional[CredentialStore] = None,
        config_store: Optional[ConfigStore] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        rng: Optional[random.Random] = None,
    ):
        self._log = request_log
        self._credential_store = credential_store
        self._config_store = config_store
        self._timeout = timeout
        self._transport = transport
        self._rng = rng or random.Random()

    async def execute(self, prompt: str) -> str:
        """Refine using the stored xAI key and chat settings"""
        config = XAIConfig()
        if self._config_store is not None:
            config = self._config_store.load(ProviderId.XAI)

        credential = None
        if self._credential_store is not None:
            credential = self._credential_store.get(ProviderId.XAI)

        return await self.refine(
            prompt,
            credential,
            config.chat_endpoint,
            model=config.chat_model,
        )

    async def refine(
        self,
        prompt: str,
        credential: Optional[str],
        endpoint: str,
        model: str = XAIConfig.chat_model,
    ) -> str:
        """Return the refined prompt, or the fallback transformation on any failure

        Args:
            prompt: Prompt to rewrite
            credential: Bearer key for the chat endpoint (None falls back directly)
            endpoint: Chat-completions URL
            model: Chat model name
        """
        if not credential:
            self._log.append(LogCategory.WARNING, "Prompt refinement: no xAI API key stored")
            return self.fallback(prompt)

        try:
            refined = await self._complete(prompt, credential, endpoint, model)
        except ImageGenerationError as e:
            self._log.append(LogCategory.ERROR, f"Prompt refinement failed: {e}")
            return self.fallback(prompt)

        self._log.append(LogCategory.INFO, "Prompt refined")
        return refined

    def fallback(self, prompt: str) -> str:
        """Append one random style suffix, replacing any earlier one"""
        base = strip_fallback_suffix(prompt)
        style = self._rng.choice(STYLE_SUFFIXES)
        result = f"{base}, {style}"
        self._log.append(LogCategory.WARNING, f"Prompt refinement fallback: appended '{style}'")
        return result

    async def _complete(self, prompt: str, credential: str, endpoint: str, model: str) -> str:
        payload = {
            "model": model,
            "messages": [
                {"role": "system", "content": SYSTEM_INSTRUCTION},
                {"role": "user", "content": f"Refine this image prompt: {prompt}"},
            ],
        }
        headers = {
            "Authorization": f"Bearer {credential}",
            "Content-Type": "application/json",
        }

        self._log.append(LogCategory.REQUEST, f"Prompt refinement: POST {endpoint} model={model}")
        started = time.monotonic()
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(endpoint, headers=headers, content=json.dumps(payload))
        except httpx.TimeoutException as e:
            raise NetworkError(f"Request timed out after {self._timeout:.0f}s") from e
        except httpx.HTTPError as e:
            raise NetworkError(f"Network error: {e}") from e

        elapsed_ms = (time.monotonic() - started) * 1000
        self._log.append(
            LogCategory.RESPONSE,
            f"Prompt refinement: HTTP {response.status_code} in {elapsed_ms:.0f} ms, "
            f"content-type={response.headers.get('content-type', 'unknown')}, "
            f"body={response.text[:_BODY_PREVIEW_LIMIT]!r}",
        )

        if not 200 <= response.status_code < 300:
            raise HttpError(response.status_code, response.text[:_BODY_PREVIEW_LIMIT])

        try:
            data = response.json()
        except ValueError as e:
            raise ParseError("Response body is not valid JSON") from e

        return self._extract_content(data)

    @staticmethod
    def _extract_content(data: Any) -> str:
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ParseError("Response has no choices[0].message.content") from e

        if not isinstance(content, str) or not content.strip():
            raise ParseError("Completion content is empty")

        return content.strip()
