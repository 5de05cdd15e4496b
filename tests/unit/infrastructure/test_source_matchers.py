"""Tests for the manifest matcher strategies and the scan fold."""

from __future__ import annotations

import base64

import pytest

from flixscrape.domain.entities import Candidate, ExtractionTrace
from flixscrape.infrastructure.sources import DEFAULT_MATCHERS, MatchContext, scan
from flixscrape.infrastructure.sources.matchers import (
    Base64Payload,
    FunctionCall,
    KeyedProperty,
    LooseQuotedString,
    PackedScript,
    QuotedManifestUrl,
    decode_base64,
)

_IFRAME = "https://embed.test/e/abc123"
_MANIFEST = "https://cdn.test/hls/master.m3u8"


@pytest.fixture()
def context() -> MatchContext:
    return MatchContext(page_url=_IFRAME, trace=ExtractionTrace(iframe_url=_IFRAME))


class _FixedMatcher:
    def __init__(self, name: str, candidate: Candidate | None) -> None:
        self.name = name
        self._candidate = candidate

    def attempt(self, body: str, context: MatchContext) -> Candidate | None:
        return self._candidate


# ---------------------------------------------------------------------------
# Individual strategies
# ---------------------------------------------------------------------------


class TestQuotedManifestUrl:
    def test_finds_quoted_url(self, context: MatchContext) -> None:
        found = QuotedManifestUrl().attempt(f'var s = "{_MANIFEST}";', context)
        assert found is not None
        assert found.url == _MANIFEST
        assert found.matcher == "quoted-manifest-url"

    def test_escaped_slashes(self, context: MatchContext) -> None:
        body = r'{"file":"https:\/\/cdn.test\/hls\/master.m3u8"}'
        found = QuotedManifestUrl().attempt(body, context)
        assert found is not None
        assert found.url == _MANIFEST

    def test_duplicates_traced_once(self, context: MatchContext) -> None:
        QuotedManifestUrl().attempt(f'"{_MANIFEST}" "{_MANIFEST}"', context)
        assert len(context.trace.candidates) == 1

    def test_highest_score_within_strategy(self, context: MatchContext) -> None:
        body = '"http://x.test/a/b/video.m3u8" "https://cdn.test/hls/master.m3u8"'
        found = QuotedManifestUrl().attempt(body, context)
        assert found is not None
        assert found.url == _MANIFEST

    def test_bait_rejected_and_traced(self, context: MatchContext) -> None:
        found = QuotedManifestUrl().attempt('"https://ads.test/pixel/master.m3u8"', context)
        assert found is None
        assert context.trace.candidates[0]["reason"] == "bait"


class TestKeyedProperty:
    def test_protocol_relative_file(self, context: MatchContext) -> None:
        body = 'sources: [{file:"//cdn.test/hls/stream.m3u8"}]'
        found = KeyedProperty().attempt(body, context)
        assert found is not None
        assert found.url == "https://cdn.test/hls/stream.m3u8"

    def test_hls2_key(self, context: MatchContext) -> None:
        found = KeyedProperty().attempt(f'{{"hls2": "{_MANIFEST}"}}', context)
        assert found is not None


class TestFunctionCall:
    def test_load_source_argument(self, context: MatchContext) -> None:
        found = FunctionCall().attempt(f"hls.loadSource('{_MANIFEST}');", context)
        assert found is not None
        assert found.matcher == "function-call"


class TestPackedScript:
    def test_url_only_visible_after_unpacking(self, context: MatchContext) -> None:
        body = (
            "eval(function(p,a,c,k,e,d){return p}"
            """('0("1://2.3/4/5.6")',10,7,'play|https|cdn|test|hls|master|m3u8'.split('|')))"""
        )
        found = PackedScript().attempt(body, context)
        assert found is not None
        assert found.url == _MANIFEST


class TestBase64Payload:
    def test_atob_argument(self, context: MatchContext) -> None:
        encoded = base64.b64encode(_MANIFEST.encode()).decode()
        found = Base64Payload().attempt(f'var u = atob("{encoded}");', context)
        assert found is not None
        assert found.url == _MANIFEST

    def test_undecodable_skipped(self, context: MatchContext) -> None:
        assert Base64Payload().attempt('atob("abcde")', context) is None

    def test_scan_continues_after_undecodable(self, context: MatchContext) -> None:
        encoded = base64.b64encode(_MANIFEST.encode()).decode()
        body = f'var a = atob("abcde"); var b = atob("{encoded}");'

        found = Base64Payload().attempt(body, context)

        assert found is not None
        assert found.url == _MANIFEST

    def test_decoded_without_manifest_ignored(self, context: MatchContext) -> None:
        encoded = base64.b64encode(b"https://cdn.test/poster/large-image.jpg").decode()
        assert Base64Payload().attempt(f'atob("{encoded}")', context) is None

    def test_decode_base64_strict(self) -> None:
        assert decode_base64("abcde") is None
        assert decode_base64("////") is None  # not utf-8
        assert decode_base64(base64.urlsafe_b64encode(b"hi?>").decode()) == "hi?>"


class TestLooseQuotedString:
    def test_last_resort_string(self, context: MatchContext) -> None:
        body = f"var cfg = ['{_MANIFEST}?t=1'];"
        found = LooseQuotedString().attempt(body, context)
        assert found is not None
        assert found.url == f"{_MANIFEST}?t=1"


# ---------------------------------------------------------------------------
# scan()
# ---------------------------------------------------------------------------


class TestScan:
    def test_all_strategies_recorded(self, context: MatchContext) -> None:
        scan("<html></html>", context)
        assert context.trace.patterns_tried == [m.name for m in DEFAULT_MATCHERS]

    def test_nothing_found(self, context: MatchContext) -> None:
        assert scan("<html><p>no player here</p></html>", context) is None

    def test_single_manifest_selected(self, context: MatchContext) -> None:
        found = scan(f'<script>player.setup({{file: "{_MANIFEST}"}})</script>', context)
        assert found is not None
        assert found.url == _MANIFEST

    def test_higher_score_wins_across_strategies(self, context: MatchContext) -> None:
        low = Candidate(url="http://x.test/a.m3u8", matcher="first", score=2)
        high = Candidate(url=_MANIFEST, matcher="second", score=7)
        found = scan("", context, [_FixedMatcher("first", low), _FixedMatcher("second", high)])
        assert found is high

    def test_tie_keeps_earlier_strategy(self, context: MatchContext) -> None:
        first = Candidate(url="https://a.test/one/master.m3u8", matcher="first", score=5)
        second = Candidate(url="https://b.test/two/master.m3u8", matcher="second", score=5)
        found = scan("", context, [_FixedMatcher("first", first), _FixedMatcher("second", second)])
        assert found is first
