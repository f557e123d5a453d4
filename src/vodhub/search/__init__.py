"""Search aggregation for vodhub."""

from vodhub.search.aggregator import Aggregator, ArrivalHook
from vodhub.search.service import SearchService

__all__ = ["Aggregator", "ArrivalHook", "SearchService"]
