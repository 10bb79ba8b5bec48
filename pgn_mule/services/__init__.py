"""Services: administrative operations and feed aggregation."""

from pgn_mule.services.relay_service import AddManyResult, FeedQuery, RelayService

__all__ = ["AddManyResult", "FeedQuery", "RelayService"]
