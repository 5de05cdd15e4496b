"""Tests for EpisodeSourcesUseCase."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from flixscrape.application.use_cases import EpisodeSourcesUseCase
from flixscrape.domain.entities import (
    ExtractionResult,
    ExtractionTrace,
    ServerItem,
    SourceLink,
    VideoSource,
)
from flixscrape.domain.exceptions import MissingRequiredParameter, UpstreamUnavailable

_BASE = "https://flixhq.test"
_EMBED = "https://embed.test/e/abc123"
_MANIFEST = "https://cdn.test/hls/master.m3u8"


@pytest.fixture()
def site() -> AsyncMock:
    mock = AsyncMock()
    mock.source_link.return_value = SourceLink(kind="iframe", link=_EMBED)
    mock.servers.return_value = [
        ServerItem(id="9001", name="UpCloud"),
        ServerItem(id="9002", name="Vidcloud"),
    ]
    return mock


@pytest.fixture()
def extractor() -> AsyncMock:
    mock = AsyncMock()
    mock.extract.return_value = ExtractionResult(
        manifest_url=_MANIFEST,
        sources=[VideoSource(url=_MANIFEST)],
        trace=ExtractionTrace(iframe_url=_EMBED, patterns_tried=["quoted-manifest-url"]),
    )
    return mock


@pytest.fixture()
def use_case(site: AsyncMock, extractor: AsyncMock) -> EpisodeSourcesUseCase:
    return EpisodeSourcesUseCase(site, extractor, base_url=_BASE)


class TestValidation:
    @pytest.mark.asyncio()
    async def test_missing_server_id_makes_no_upstream_call(
        self, use_case: EpisodeSourcesUseCase, site: AsyncMock, extractor: AsyncMock
    ) -> None:
        with pytest.raises(MissingRequiredParameter, match="serverId is required"):
            await use_case.execute("19724", None)

        site.source_link.assert_not_awaited()
        extractor.extract.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_malformed_episode_id_rejected(
        self, use_case: EpisodeSourcesUseCase, site: AsyncMock
    ) -> None:
        with pytest.raises(MissingRequiredParameter, match="episodeId"):
            await use_case.execute("39431", "9001", "5001/../x")
        site.source_link.assert_not_awaited()


class TestExecute:
    @pytest.mark.asyncio()
    async def test_manifest_resolved(
        self, use_case: EpisodeSourcesUseCase, site: AsyncMock, extractor: AsyncMock
    ) -> None:
        result = await use_case.execute("19724", "9001")

        site.source_link.assert_awaited_once_with("9001")
        extractor.extract.assert_awaited_once_with(_EMBED, referer=f"{_BASE}/")
        assert result.success is True
        assert result.manifest_url == _MANIFEST
        assert result.server is None
        assert result.trace is None
        site.servers.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_null_manifest_is_success(
        self, use_case: EpisodeSourcesUseCase, extractor: AsyncMock
    ) -> None:
        extractor.extract.return_value = ExtractionResult(manifest_url=None)

        result = await use_case.execute("19724", "9001")

        assert result.success is True
        assert result.manifest_url is None

    @pytest.mark.asyncio()
    async def test_non_iframe_link_skips_extraction(
        self, use_case: EpisodeSourcesUseCase, site: AsyncMock, extractor: AsyncMock
    ) -> None:
        site.source_link.return_value = SourceLink(kind="direct", link="https://x.test/v")

        result = await use_case.execute("19724", "9001")

        assert result.success is False
        assert result.kind == "direct"
        extractor.extract.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_empty_link_is_not_success(
        self, use_case: EpisodeSourcesUseCase, site: AsyncMock, extractor: AsyncMock
    ) -> None:
        site.source_link.return_value = SourceLink(kind="iframe", link="")

        result = await use_case.execute("19724", "9001")

        assert result.success is False
        assert result.link is None
        extractor.extract.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_episode_server_attached(
        self, use_case: EpisodeSourcesUseCase, site: AsyncMock
    ) -> None:
        result = await use_case.execute("39431", "9002", "5001")

        site.servers.assert_awaited_once_with("39431", "5001")
        assert result.server == ServerItem(id="9002", name="Vidcloud")
        assert result.episode_id == "5001"

    @pytest.mark.asyncio()
    async def test_server_list_failure_tolerated(
        self, use_case: EpisodeSourcesUseCase, site: AsyncMock
    ) -> None:
        site.servers.side_effect = UpstreamUnavailable(f"{_BASE}/ajax", status_code=500)

        result = await use_case.execute("39431", "9002", "5001")

        assert result.server is None
        assert result.manifest_url == _MANIFEST

    @pytest.mark.asyncio()
    async def test_source_link_failure_propagates(
        self, use_case: EpisodeSourcesUseCase, site: AsyncMock
    ) -> None:
        site.source_link.side_effect = UpstreamUnavailable(f"{_BASE}/ajax", status_code=502)

        with pytest.raises(UpstreamUnavailable):
            await use_case.execute("19724", "9001")


class TestDebugTrace:
    @pytest.mark.asyncio()
    async def test_trace_attached_on_request(self, use_case: EpisodeSourcesUseCase) -> None:
        result = await use_case.execute("19724", "9001", debug=True)

        assert result.trace is not None
        assert result.trace.patterns_tried == ["quoted-manifest-url"]

    @pytest.mark.asyncio()
    async def test_trace_attached_by_default_setting(
        self, site: AsyncMock, extractor: AsyncMock
    ) -> None:
        use_case = EpisodeSourcesUseCase(site, extractor, base_url=_BASE, debug_default=True)

        result = await use_case.execute("19724", "9001")

        assert result.trace is not None
