"""
Promotions services - Business logic layer.

- Progress calculation and persistence per participation
- Joining, listing and dashboard for installers
- Reward settlement and expiry sweep
- Per-promotion analytics
"""

from .promotion_queries import (
    get_promotion,
    list_active_promotions,
    get_participation,
    upsert_participation,
)

from .progress_calculation import (
    ProgressResult,
    evaluate_progress,
    compute_progress,
    refresh_installer_progress,
)

from .participation_management import (
    is_eligible_for_promotion,
    join_promotion,
    get_installer_promotions,
    get_promotion_dashboard_stats,
    update_reward_status,
    expire_participations,
)

from .promotion_analytics import get_promotion_analytics

from .exceptions import (
    PromotionsServiceError,
    NotFoundError,
    PromotionNotFoundError,
    ParticipationNotFoundError,
    ConfigurationError,
    ConflictError,
    PromotionNotActiveError,
    NotEligibleError,
    AlreadyParticipatingError,
    InvalidRewardTransitionError,
)

__all__ = [
    # Queries
    'get_promotion',
    'list_active_promotions',
    'get_participation',
    'upsert_participation',
    # Progress
    'ProgressResult',
    'evaluate_progress',
    'compute_progress',
    'refresh_installer_progress',
    # Participation
    'is_eligible_for_promotion',
    'join_promotion',
    'get_installer_promotions',
    'get_promotion_dashboard_stats',
    'update_reward_status',
    'expire_participations',
    # Analytics
    'get_promotion_analytics',
    # Exceptions
    'PromotionsServiceError',
    'NotFoundError',
    'PromotionNotFoundError',
    'ParticipationNotFoundError',
    'ConfigurationError',
    'ConflictError',
    'PromotionNotActiveError',
    'NotEligibleError',
    'AlreadyParticipatingError',
    'InvalidRewardTransitionError',
]
