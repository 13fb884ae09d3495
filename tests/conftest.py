import asyncio

import pytest

from pagewalk import MemoryCollectionSource, disable_tracing
from pagewalk.sources.base import FetchRequest, FetchResult


class GatedSource:
    """Wraps a source and holds back requests matching ``block`` until released."""

    def __init__(self, inner: MemoryCollectionSource, block=lambda request: False):
        self.inner = inner
        self.block = block
        self.gate = asyncio.Event()
        self.requests: list[FetchRequest] = []

    async def fetch(self, request: FetchRequest) -> FetchResult:
        self.requests.append(request)
        if self.block(request):
            await self.gate.wait()
        return await self.inner.fetch(request)


class FailingSource:
    """Raises ``error`` for the next ``failures`` fetches, then delegates."""

    def __init__(self, inner: MemoryCollectionSource, error: Exception, failures: int = 1):
        self.inner = inner
        self.error = error
        self.failures = failures

    async def fetch(self, request: FetchRequest) -> FetchResult:
        if self.failures > 0:
            self.failures -= 1
            raise self.error
        return await self.inner.fetch(request)


@pytest.fixture(autouse=True)
def reset_tracing():
    """Reset observability state between tests."""
    yield
    disable_tracing()


@pytest.fixture
def letters_source():
    """Collection [A, B, C, D, E] ordered by id."""
    return MemoryCollectionSource([{"id": letter} for letter in "ABCDE"], name="letters")


@pytest.fixture
def students_source():
    students = [
        {"id": "s01", "name": "Ana Reyes", "email": "ana@school.test", "strand": "STEM", "grade": 11, "createdAt": "2024-06-01"},
        {"id": "s02", "name": "Bob Cruz", "email": "bob@school.test", "strand": "ABM", "grade": 12, "createdAt": "2024-06-02"},
        {"id": "s03", "name": "Carla Diaz", "email": "carla@school.test", "strand": "STEM", "grade": 12, "createdAt": "2024-06-03"},
        {"id": "s04", "name": "Dan Santos", "email": "dan@school.test", "strand": "HUMSS", "grade": 11, "createdAt": "2024-06-04"},
        {"id": "s05", "name": "Elena Manalo", "email": "elena@school.test", "strand": "STEM", "grade": 11, "createdAt": "2024-06-05"},
        {"id": "s06", "name": "Fidel Ramos", "email": "fidel@school.test", "strand": "ABM", "grade": 11, "createdAt": "2024-06-06"},
        {"id": "s07", "name": "Gina Lopez", "email": "gina@school.test", "strand": "STEM", "grade": 12, "createdAt": "2024-06-07"},
    ]
    return MemoryCollectionSource(students, name="students")


@pytest.fixture
def gated_source():
    return GatedSource


@pytest.fixture
def failing_source():
    return FailingSource


def ids(items) -> list:
    return [item["id"] for item in items]


@pytest.fixture
def item_ids():
    return ids
