"""
Shared test fixtures and configuration for entire test suite.

Provides: controllable fake analysis clients, store/scheduler wiring,
sample uploads and image bytes
Dependencies: pytest, Pillow
System role: Test infrastructure and fixture management
"""

import asyncio
import io

import pytest
from PIL import Image

from stockmeta.core.job import ImageUpload
from stockmeta.core.job_store import JobStore
from stockmeta.core.previews import PreviewRegistry
from stockmeta.core.scheduler import Scheduler
from stockmeta.models.analysis import AnalysisResult


class ControlledAnalysisClient:
    """
    Analysis client whose calls settle only when the test says so.

    Each call is keyed by its payload bytes, so tests can settle specific
    jobs in any order.
    """

    def __init__(self) -> None:
        self.calls: list[bytes] = []
        self._futures: dict[bytes, asyncio.Future] = {}

    @property
    def outstanding(self) -> list[bytes]:
        return [payload for payload, fut in self._futures.items() if not fut.done()]

    async def analyze(self, image: bytes, mime_type: str) -> AnalysisResult:
        future = asyncio.get_running_loop().create_future()
        self.calls.append(image)
        self._futures[image] = future
        return await future

    def succeed(self, payload: bytes, result: AnalysisResult | None = None) -> None:
        result = result or AnalysisResult(
            title=f"Title for {payload.decode()}",
            tags=[f"tag{i}" for i in range(47)],
        )
        self._futures[payload].set_result(result)

    def fail(self, payload: bytes, exc: BaseException) -> None:
        self._futures[payload].set_exception(exc)

    def cancel_all(self) -> None:
        for payload in self.outstanding:
            self._futures[payload].cancel()


class InstantAnalysisClient:
    """Analysis client that settles after one loop iteration."""

    def __init__(self, failing: set[bytes] | None = None) -> None:
        self.failing = failing or set()
        self.calls: list[tuple[bytes, str]] = []
        self.active = 0
        self.max_active = 0

    async def analyze(self, image: bytes, mime_type: str) -> AnalysisResult:
        self.calls.append((image, mime_type))
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(0)
            if image in self.failing:
                raise RuntimeError(f"model rejected {image.decode()}")
            return AnalysisResult(title=f"Title {image.decode()}", tags=["one", "two"])
        finally:
            self.active -= 1


async def run_loop(iterations: int = 10) -> None:
    """Give the event loop enough turns for tasks and done-callbacks to run."""
    for _ in range(iterations):
        await asyncio.sleep(0)


def make_uploads(count: int, start: int = 0) -> list[ImageUpload]:
    return [
        ImageUpload(filename=f"img-{i}.jpg", mime_type="image/jpeg", data=f"img-{i}".encode())
        for i in range(start, start + count)
    ]


@pytest.fixture
def controlled_client() -> ControlledAnalysisClient:
    return ControlledAnalysisClient()


@pytest.fixture
def instant_client() -> InstantAnalysisClient:
    return InstantAnalysisClient()


@pytest.fixture
def store() -> JobStore:
    return JobStore(previews=PreviewRegistry(size=32))


@pytest.fixture
async def scheduler(store: JobStore, controlled_client: ControlledAnalysisClient):
    """
    Scheduler with C=3 over the controlled client.

    Teardown cancels whatever the test left unsettled so no task outlives
    the event loop.
    """
    scheduler = Scheduler(store=store, client=controlled_client, concurrency=3)
    yield scheduler

    while controlled_client.outstanding:
        controlled_client.cancel_all()
        await run_loop()
    await scheduler.aclose()


@pytest.fixture
def uploads():
    """Factory fixture building uploads whose payload is b'img-<n>'."""
    return make_uploads


@pytest.fixture
def loop_turns():
    """Coroutine function that yields to the event loop a few times."""
    return run_loop


@pytest.fixture
def png_bytes() -> bytes:
    """A real 64x48 PNG image."""
    buffer = io.BytesIO()
    Image.new("RGB", (64, 48), color=(200, 120, 40)).save(buffer, format="PNG")
    return buffer.getvalue()
