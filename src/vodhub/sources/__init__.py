"""Content site access for vodhub.

- SourceConfig: a registered content-listing site
- SiteRegistry: read-only view of the site registry document
- SourceClient: httpx client speaking the sites' list/detail query API
"""

from vodhub.sources.client import SourceClient, build_url, extract_items
from vodhub.sources.models import SourceConfig, stamp_items
from vodhub.sources.registry import SiteRegistry

__all__ = [
    "SourceConfig",
    "SiteRegistry",
    "SourceClient",
    "build_url",
    "extract_items",
    "stamp_items",
]
