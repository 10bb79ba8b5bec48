"""Ingestion: upstream fetching and the adaptive poll scheduler."""

from pgn_mule.ingestion.http_client import FetchResult, UpstreamClient
from pgn_mule.ingestion.scheduler import PollScheduler

__all__ = ["FetchResult", "PollScheduler", "UpstreamClient"]
