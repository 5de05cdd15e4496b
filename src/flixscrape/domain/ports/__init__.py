from .cache import CachePort
from .metadata import MetadataEnricherPort
from .page_fetcher import FetchedPage, PageFetcherPort
from .source_extractor import SourceExtractorPort
from .upstream_site import UpstreamSitePort

__all__ = [
    "CachePort",
    "FetchedPage",
    "MetadataEnricherPort",
    "PageFetcherPort",
    "SourceExtractorPort",
    "UpstreamSitePort",
]
