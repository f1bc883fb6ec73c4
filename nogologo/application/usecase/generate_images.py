"""Generate Images Use Case - Application Layer"""

import asyncio
import logging
from typing import AsyncIterator, Callable, Dict, List, Optional, Tuple

from ...domain.entity.image import GenerationRequest, GenerationResult, ProviderId
from ...domain.entity.log_entry import LogCategory
from ...domain.entity.provider_config import ProviderConfig
from ...domain.exceptions import ImageGenerationError, UnsupportedOperation
from ...domain.repository.config_store import ConfigStore
from ...domain.repository.credential_store import CredentialStore
from ...domain.service.image_router import ImageRouter, ImageRouterError
from ...domain.service.request_log import RequestLog

logger = logging.getLogger(__name__)

ResultCallback = Callable[[GenerationResult], None]


class GenerationRound:
    """Independent per-provider calls of one request

    Results are delivered as each provider finishes. ``is_generating`` stays
    true until every dispatched provider has completed.
    """

    def __init__(
        self,
        request: GenerationRequest,
        on_result: Optional[ResultCallback] = None,
    ):
        self.request = request
        self._on_result = on_result
        self._tasks: Dict[ProviderId, "asyncio.Task[GenerationResult]"] = {}
        self._results: Dict[ProviderId, GenerationResult] = {}
        # Completion order; each iterator keeps its own cursor into it
        self._completed: List[GenerationResult] = []
        self._progress = asyncio.Event()
        self._remaining = 0
        self._finished = asyncio.Event()
        self._finished.set()

    def _start(self, provider_id: ProviderId, coro) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks[provider_id] = task
        self._remaining += 1
        self._finished.clear()
        task.add_done_callback(lambda t: self._task_done(provider_id, t))

    def _task_done(self, provider_id: ProviderId, task: "asyncio.Task[GenerationResult]") -> None:
        result = GenerationResult.failure(provider_id, ImageGenerationError("Generation cancelled"))
        try:
            if task.cancelled():
                logger.warning(f"Generation task for {provider_id.value} was cancelled")
            else:
                result = task.result()
        finally:
            self._record(result)

        if self._on_result is not None:
            try:
                self._on_result(result)
            except Exception as e:
                logger.error(f"Result callback failed for {result.provider_id.value}: {e}", exc_info=True)

    def _record(self, result: GenerationResult) -> None:
        self._results[result.provider_id] = result
        self._completed.append(result)
        self._remaining -= 1
        if self._remaining == 0:
            self._finished.set()

        # Wake every iterator waiting on the previous event
        self._progress.set()
        self._progress = asyncio.Event()

    @property
    def dispatched(self) -> Tuple[ProviderId, ...]:
        return tuple(self._tasks)

    @property
    def pending(self) -> int:
        return self._remaining

    @property
    def is_generating(self) -> bool:
        return not self._finished.is_set()

    @property
    def results(self) -> Dict[ProviderId, GenerationResult]:
        """Results received so far"""
        return dict(self._results)

    async def wait(self) -> Dict[ProviderId, GenerationResult]:
        """Wait for every dispatched provider"""
        await self._finished.wait()
        return self.results

    async def __aiter__(self) -> AsyncIterator[GenerationResult]:
        """Yield results in completion order

        Every iteration starts from the first completed result, so a round
        can be iterated more than once.
        """
        index = 0
        while index < len(self._tasks):
            if index < len(self._completed):
                yield self._completed[index]
                index += 1
            else:
                await self._progress.wait()


class GenerateImagesUseCase:
    """Fans a request out to every selected provider with a stored key"""

    def __init__(
        self,
        image_router: ImageRouter,
        credential_store: CredentialStore,
        config_store: ConfigStore,
        request_log: RequestLog,
    ):
        self._image_router = image_router
        self._credential_store = credential_store
        self._config_store = config_store
        self._log = request_log

    def dispatch(
        self,
        request: GenerationRequest,
        on_result: Optional[ResultCallback] = None,
    ) -> GenerationRound:
        """Start one task per provider and return immediately

        Must be called from a running event loop. Providers without a stored
        key are skipped and excluded from the round.
        """
        generation_round = GenerationRound(request, on_result)

        for provider_id in self._ordered(request.providers):
            credential = self._credential_store.get(provider_id)
            if not credential:
                self._log.append(
                    LogCategory.WARNING,
                    f"{provider_id.display_name}: skipped, no API key stored",
                )
                continue

            # Snapshot taken now; later settings changes do not reach this call
            config = self._config_store.load(provider_id)
            self._log.append(
                LogCategory.INFO,
                f"{provider_id.display_name}: generating {request.image_count} image(s) "
                f"for prompt: {request.prompt}",
            )
            generation_round._start(
                provider_id,
                self._run_provider(provider_id, request, credential, config),
            )

        if not generation_round.dispatched:
            self._log.append(LogCategory.WARNING, "No selected provider has an API key")

        return generation_round

    async def execute(self, request: GenerationRequest) -> Dict[ProviderId, GenerationResult]:
        """Dispatch and wait for every provider"""
        return await self.dispatch(request).wait()

    async def _run_provider(
        self,
        provider_id: ProviderId,
        request: GenerationRequest,
        credential: str,
        config: ProviderConfig,
    ) -> GenerationResult:
        try:
            provider = self._image_router.get_provider(provider_id)
        except ImageRouterError as e:
            error = UnsupportedOperation(str(e))
            self._log.append(LogCategory.ERROR, f"{provider_id.display_name}: {error}")
            return GenerationResult.failure(provider_id, error)

        try:
            return await provider.generate_images(
                request.prompt,
                request.image_count,
                credential,
                config,
            )
        except Exception as e:
            logger.error(f"Unexpected error from {provider_id.value}: {e}", exc_info=True)
            error = ImageGenerationError(f"Unexpected error: {e}")
            self._log.append(LogCategory.ERROR, f"{provider_id.display_name}: {error}")
            return GenerationResult.failure(provider_id, error)

    @staticmethod
    def _ordered(providers) -> List[ProviderId]:
        return [p for p in ProviderId if p in providers]
