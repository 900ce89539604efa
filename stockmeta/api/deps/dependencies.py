"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: stockmeta.configs, stockmeta.core, stockmeta.boundary
System role: DI container for service injection
"""

from stockmeta.application.services import BatchService
from stockmeta.configs import Settings, get_settings
from stockmeta.core.job_store import JobStore
from stockmeta.core.previews import PreviewRegistry
from stockmeta.core.scheduler import Scheduler


class ServiceCache:
    """Container for the process-wide store, scheduler and analysis client."""

    def __init__(self, settings: Settings | None = None):
        self._settings = settings
        self._analysis_client = None
        self._store = None
        self._scheduler = None
        self._batch_service = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def analysis_client(self):
        """Get cached Gemini analysis client."""
        if self._analysis_client is None:
            from google import genai

            from stockmeta.boundary.gemini import GeminiAnalysisClient

            gemini = self.settings.gemini
            if not gemini.api_key:
                raise ValueError("GEMINI_API_KEY environment variable is required")
            self._analysis_client = GeminiAnalysisClient(
                google_client=genai.Client(api_key=gemini.api_key),
                model_id=gemini.model,
                temperature=gemini.temperature,
            )
        return self._analysis_client

    @property
    def store(self) -> JobStore:
        """Get cached job store."""
        if self._store is None:
            self._store = JobStore(
                previews=PreviewRegistry(size=self.settings.scheduler.preview_size)
            )
        return self._store

    @property
    def scheduler(self) -> Scheduler:
        """Get cached scheduler bound to the cached store."""
        if self._scheduler is None:
            config = self.settings.scheduler
            self._scheduler = Scheduler(
                store=self.store,
                client=self.analysis_client,
                concurrency=config.max_concurrent_requests,
                analysis_timeout=config.analysis_timeout_seconds,
            )
        return self._scheduler

    @property
    def batch_service(self) -> BatchService:
        """Get cached batch service."""
        if self._batch_service is None:
            self._batch_service = BatchService(
                store=self.store,
                scheduler=self.scheduler,
                auto_start=self.settings.scheduler.auto_start,
            )
        return self._batch_service

    async def aclose(self) -> None:
        """Cancel outstanding analysis calls, then drop every instance."""
        if self._scheduler is not None:
            await self._scheduler.aclose()
        self.clear()

    def clear(self) -> None:
        """Clear all cached instances."""
        if self._store is not None:
            self._store.clear()
        self._analysis_client = None
        self._store = None
        self._scheduler = None
        self._batch_service = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_batch_service() -> BatchService:
    """
    Get batch service instance.

    Returns:
        BatchService: Shared service over the process-wide store and scheduler
    """
    return get_service_cache().batch_service
