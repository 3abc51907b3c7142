"""Tests for the generation pipeline."""

from __future__ import annotations

import logging
import threading

import pytest

from resume_delivery.exceptions import (
    EngineUnavailableError,
    ProfileValidationError,
    RenderFailedError,
    RenderTimeoutError,
    StoreWriteError,
)
from resume_delivery.export.renderer import DocumentRenderer
from resume_delivery.models.profile import ProfileData
from resume_delivery.pipeline.orchestrator import (
    GenerationResult,
    ResumePipeline,
    build_file_name,
    validate_request,
)

TOKEN = "pay_1700000000_abc123xyz"


@pytest.fixture
def pipeline(renderer, store) -> ResumePipeline:
    return ResumePipeline(renderer, store)


class TestGenerate:
    @pytest.mark.asyncio
    async def test_generate(self, pipeline, store, sample_profile):
        result = await pipeline.generate(sample_profile, TOKEN)
        assert isinstance(result, GenerationResult)
        assert result.file_name == "Resume_Ada_Lovelace.pdf"
        assert result.expires_in_seconds == 60
        assert result.download_url == f"/api/resume/download/{result.artifact_id}"

    @pytest.mark.asyncio
    async def test_artifact_exists_before_handle_returned(self, pipeline, store, sample_profile):
        result = await pipeline.generate(sample_profile, TOKEN)
        stored = store.get(result.artifact_id)
        assert stored.data[:4] == b"%PDF"
        assert stored.artifact.file_name == result.file_name

    @pytest.mark.asyncio
    async def test_custom_download_prefix(self, renderer, store, sample_profile):
        pipeline = ResumePipeline(renderer, store, download_prefix="/files/")
        result = await pipeline.generate(sample_profile, TOKEN)
        assert result.download_url.startswith("/files/")
        assert "//" not in result.download_url

    @pytest.mark.asyncio
    async def test_store_write_runs_off_event_loop(self, pipeline, store, sample_profile, monkeypatch):
        threads = []
        put = store.put

        def recording_put(*args, **kwargs):
            threads.append(threading.get_ident())
            return put(*args, **kwargs)

        monkeypatch.setattr(store, "put", recording_put)
        await pipeline.generate(sample_profile, TOKEN)
        assert threads and threads[0] != threading.get_ident()

    @pytest.mark.asyncio
    async def test_request_id_passed_through(self, pipeline, sample_profile):
        result = await pipeline.generate(sample_profile, TOKEN, request_id="req-1")
        assert result.request_id == "req-1"


class TestValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, "", "   "])
    async def test_missing_payment_token(self, pipeline, launcher, sample_profile, token):
        with pytest.raises(ProfileValidationError, match="Payment"):
            await pipeline.generate(sample_profile, token)
        assert launcher.launched == 0

    @pytest.mark.asyncio
    async def test_missing_required_field_rejected_before_render(
        self, pipeline, renderer, launcher, store, ada_profile
    ):
        with pytest.raises(ProfileValidationError) as exc_info:
            await pipeline.generate(ada_profile, TOKEN)
        assert exc_info.value.missing_fields == ["email", "phone", "current_position"]
        assert renderer.sessions_started == 0
        assert launcher.launched == 0
        assert store.stats()["active"] == 0

    def test_validate_request_ok(self, sample_profile):
        validate_request(sample_profile, TOKEN)


class TestFailures:
    @pytest.mark.asyncio
    async def test_render_failure_stores_nothing(self, make_launcher, store, sample_profile, caplog):
        renderer = DocumentRenderer(make_launcher(fail_on="launch"))
        pipeline = ResumePipeline(renderer, store)
        with caplog.at_level(logging.ERROR):
            with pytest.raises(EngineUnavailableError):
                await pipeline.generate(sample_profile, TOKEN, request_id="req-render")
        assert store.stats()["active"] == 0
        assert renderer.live_sessions == 0
        assert "[req-render] stage=render" in caplog.text

    @pytest.mark.asyncio
    async def test_timeout_propagates(self, make_launcher, store, sample_profile):
        pipeline = ResumePipeline(DocumentRenderer(make_launcher(fail_on="timeout")), store)
        with pytest.raises(RenderTimeoutError):
            await pipeline.generate(sample_profile, TOKEN)

    @pytest.mark.asyncio
    async def test_store_failure_logged(self, renderer, store, sample_profile, caplog, monkeypatch):
        def reject(*args, **kwargs):
            raise StoreWriteError("Permission denied")

        monkeypatch.setattr(store, "put", reject)
        pipeline = ResumePipeline(renderer, store)
        with caplog.at_level(logging.ERROR):
            with pytest.raises(StoreWriteError):
                await pipeline.generate(sample_profile, TOKEN, request_id="req-store")
        assert "[req-store] stage=store" in caplog.text
        assert renderer.live_sessions == 0

    @pytest.mark.asyncio
    async def test_unexpected_store_error_wrapped(self, renderer, store, sample_profile, caplog, monkeypatch):
        def corrupt(*args, **kwargs):
            raise ValueError("bad artifact id")

        monkeypatch.setattr(store, "put", corrupt)
        pipeline = ResumePipeline(renderer, store)
        with caplog.at_level(logging.ERROR):
            with pytest.raises(StoreWriteError) as exc_info:
                await pipeline.generate(sample_profile, TOKEN, request_id="req-odd")
        assert isinstance(exc_info.value.__cause__, ValueError)
        assert "[req-odd] stage=store failed: ValueError" in caplog.text

    @pytest.mark.asyncio
    async def test_unexpected_render_error_wrapped(self, renderer, store, sample_profile, caplog, monkeypatch):
        async def broken(*args, **kwargs):
            raise KeyError("theme")

        monkeypatch.setattr(renderer, "render", broken)
        pipeline = ResumePipeline(renderer, store)
        with caplog.at_level(logging.ERROR):
            with pytest.raises(RenderFailedError):
                await pipeline.generate(sample_profile, TOKEN, request_id="req-key")
        assert "[req-key] stage=render failed: KeyError" in caplog.text
        assert store.stats()["active"] == 0


class TestBuildFileName:
    def test_simple(self):
        assert build_file_name(ProfileData(first_name="Ada", last_name="Lovelace")) == (
            "Resume_Ada_Lovelace.pdf"
        )

    def test_unsafe_characters(self):
        profile = ProfileData(first_name='../"evil"', last_name="O'Brien Smith")
        name = build_file_name(profile)
        assert name == "Resume_evil_O_Brien_Smith.pdf"
        assert "/" not in name and '"' not in name

    def test_missing_names(self):
        assert build_file_name(ProfileData()) == "Resume.pdf"
