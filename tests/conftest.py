"""Shared test fixtures."""

from __future__ import annotations

import asyncio

import pytest

from resume_delivery.config import StoreConfig
from resume_delivery.exceptions import RenderTimeoutError
from resume_delivery.export.renderer import DocumentRenderer
from resume_delivery.models.profile import (
    ExperienceLevel,
    JobType,
    ProfileData,
    WorkType,
)
from resume_delivery.storage.artifact_store import ArtifactStore
from resume_delivery.storage.backends import MemoryBackend


class FakeClock:
    """Manually advanced wall clock."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakePage:
    def __init__(self, launcher: FakeLauncher):
        self.launcher = launcher

    async def set_content(self, html: str, *, wait_until: str, timeout: float) -> None:
        self.launcher.contents.append(html)
        self.launcher.wait_events.append((wait_until, timeout))
        if self.launcher.delay:
            await asyncio.sleep(self.launcher.delay)
        if self.launcher.fail_on == "timeout":
            raise RenderTimeoutError(f"Content did not reach {wait_until} within {timeout}ms")
        if self.launcher.fail_on == "load":
            raise ConnectionError("net::ERR_ABORTED")

    async def pdf(self, **options) -> bytes:
        self.launcher.pdf_calls.append(options)
        if self.launcher.fail_on == "print":
            raise RuntimeError("Printing failed: target crashed")
        if self.launcher.fail_on == "empty":
            return b""
        return b"%PDF-1.4\n% fake " + options["format"].encode() + b"\n%%EOF\n"


class FakeEngine:
    def __init__(self, launcher: FakeLauncher):
        self.launcher = launcher
        self.closed = False

    async def new_page(self) -> FakePage:
        return FakePage(self.launcher)

    async def close(self) -> None:
        self.closed = True
        self.launcher.live -= 1
        if self.launcher.fail_on == "close":
            raise RuntimeError("browser already gone")


class FakeLauncher:
    """Engine launcher that records sessions instead of starting a browser.

    ``fail_on`` selects a failure: "launch", "timeout", "load", "print",
    "empty" or "close".
    """

    def __init__(self, fail_on: str | None = None, delay: float = 0.0):
        self.fail_on = fail_on
        self.delay = delay
        self.launched = 0
        self.live = 0
        self.max_live = 0
        self.engines: list[FakeEngine] = []
        self.contents: list[str] = []
        self.wait_events: list[tuple[str, float]] = []
        self.pdf_calls: list[dict] = []

    async def launch(self) -> FakeEngine:
        if self.fail_on == "launch":
            raise RuntimeError("Executable doesn't exist at /ms-playwright/chromium")
        self.launched += 1
        self.live += 1
        self.max_live = max(self.max_live, self.live)
        engine = FakeEngine(self)
        self.engines.append(engine)
        return engine


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> ArtifactStore:
    return ArtifactStore(StoreConfig(ttl_seconds=60, base_dir=None), MemoryBackend(), clock=clock)


@pytest.fixture
def launcher() -> FakeLauncher:
    return FakeLauncher()


@pytest.fixture
def renderer(launcher) -> DocumentRenderer:
    return DocumentRenderer(launcher, max_sessions=2, quiescence_timeout_ms=5000)


@pytest.fixture
def ada_profile() -> ProfileData:
    return ProfileData(first_name="Ada", last_name="Lovelace", skills="C++, Math, Logic")


@pytest.fixture
def sample_profile() -> ProfileData:
    return ProfileData(
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        phone="+44 20 7946 0000",
        location="London, UK",
        current_position="Analytical Engine Programmer",
        skills="C++, Math, Logic, Python",
        experience_level=ExperienceLevel.SENIOR,
        desired_salary="$150k",
        work_type=WorkType.HYBRID,
        job_type=JobType.FULL_TIME,
    )


@pytest.fixture
def sample_request_body(sample_profile) -> dict:
    return {
        "userId": "user-42",
        "profileData": sample_profile.model_dump(mode="json"),
        "paymentToken": "pay_1700000000_abc123xyz",
    }


@pytest.fixture
def make_launcher():
    """Factory for launchers with a failure mode or artificial load delay."""
    return FakeLauncher
