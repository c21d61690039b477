"""
Service classes for the marketplace app.

Usage:
    from marketplace.services import (
        MatchingService,
        MatchConfirmationService,
        ServiceCompletionService,
        MarketplaceService,
        RatingService,
    )
"""

from marketplace.services.completion import ServiceCompletionService
from marketplace.services.listings import MarketplaceService
from marketplace.services.match_confirmation import (
    MatchConfirmationService,
    MatchResult,
)
from marketplace.services.matching import MatchingService
from marketplace.services.ratings import RatingService

__all__ = [
    "MarketplaceService",
    "MatchConfirmationService",
    "MatchResult",
    "MatchingService",
    "RatingService",
    "ServiceCompletionService",
]
