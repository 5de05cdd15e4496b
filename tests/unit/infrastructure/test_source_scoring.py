"""Tests for manifest URL normalisation, validation and scoring."""

from __future__ import annotations

import pytest

from flixscrape.infrastructure.sources.scoring import (
    SCORE_CLEAN_PATH,
    SCORE_HINT,
    SCORE_HTTPS,
    SCORE_LENGTH_40,
    SCORE_LENGTH_80,
    normalize_url,
    quality_label,
    rejection_reason,
    score_url,
)

_IFRAME = "https://embed.test/e/abc123"


class TestNormalizeUrl:
    def test_protocol_relative_uses_iframe_scheme(self) -> None:
        assert normalize_url("//cdn.test/x.m3u8", _IFRAME) == "https://cdn.test/x.m3u8"

    def test_absolute_path_uses_iframe_origin(self) -> None:
        assert normalize_url("/hls/x.m3u8", _IFRAME) == "https://embed.test/hls/x.m3u8"

    def test_escaped_slashes(self) -> None:
        raw = r"https:\/\/cdn.test\/hls\/x.m3u8"
        assert normalize_url(raw, _IFRAME) == "https://cdn.test/hls/x.m3u8"

    def test_absolute_url_untouched(self) -> None:
        assert normalize_url(" https://cdn.test/a.m3u8 ", _IFRAME) == "https://cdn.test/a.m3u8"


class TestRejectionReason:
    @pytest.mark.parametrize(
        ("url", "reason"),
        [
            ("https://a.io/x.m3u8", "too_short"),
            ("https://cdn.test/video.mp4?x=1", "no_manifest"),
            ("ftp://cdn.test/stream/master.m3u8", "not_http"),
            ("https://cdn.test/stream/.m3u8", "degenerate"),
            ("https://cdn.test/${id}/master.m3u8", "degenerate"),
            ("https://ads.test/pixel/master.m3u8", "bait"),
            ("https://cdn.test/subs/track1.m3u8", "bait"),
        ],
    )
    def test_rejected(self, url: str, reason: str) -> None:
        assert rejection_reason(url) == reason

    def test_accepted(self) -> None:
        assert rejection_reason("https://cdn.test/hls/master.m3u8") is None

    def test_query_string_allowed(self) -> None:
        assert rejection_reason("https://cdn.test/hls/index.m3u8?token=abc") is None


class TestScoreUrl:
    def test_https_worth_more_than_http(self) -> None:
        https = score_url("https://x.test/a/b/video.m3u8")
        http = score_url("http://x.test/a/b/video.m3u8")
        assert https - http == SCORE_HTTPS

    def test_hint_and_clean_path(self) -> None:
        assert score_url("https://cdn.test/hls/master.m3u8") == (
            SCORE_HTTPS + SCORE_HINT + SCORE_CLEAN_PATH
        )

    def test_long_url_bonuses(self) -> None:
        url = "https://x.test/" + "a" * 70 + "/video.m3u8"
        assert score_url(url) == (
            SCORE_HTTPS + SCORE_LENGTH_40 + SCORE_LENGTH_80 + SCORE_CLEAN_PATH
        )

    def test_manifest_mid_path_loses_clean_path_bonus(self) -> None:
        clean = score_url("https://x.test/a/b/video.m3u8")
        proxied = score_url("https://x.test/a/b/video.m3u8/go")
        assert clean - proxied == SCORE_CLEAN_PATH


class TestQualityLabel:
    def test_resolution_in_path(self) -> None:
        assert quality_label("https://cdn.test/1080p/index.m3u8") == "1080p"

    def test_resolution_without_suffix(self) -> None:
        assert quality_label("https://cdn.test/index-720.m3u8") == "720p"

    def test_default(self) -> None:
        assert quality_label("https://cdn.test/index.m3u8") == "auto"
        assert quality_label("https://cdn.test/file.mp4", "720p") == "720p"
