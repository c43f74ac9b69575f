"""Infrastructure layer exports."""

from .ranking_api import RankingAPIClient, RankingAPIError
from .service import (
    CheckResult,
    RankingService,
    configure_ranking_service,
    get_ranking_service,
    ranking_service_configured,
)

__all__ = [
    "CheckResult",
    "RankingAPIClient",
    "RankingAPIError",
    "RankingService",
    "configure_ranking_service",
    "get_ranking_service",
    "ranking_service_configured",
]
