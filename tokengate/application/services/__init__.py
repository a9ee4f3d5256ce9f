from tokengate.application.services.token_lifecycle import TokenLifecycleManager
from tokengate.application.services.usage_stats_service import UsageStatsService
from tokengate.application.services.verification_pipeline import VerificationPipeline

__all__ = ["TokenLifecycleManager", "UsageStatsService", "VerificationPipeline"]
