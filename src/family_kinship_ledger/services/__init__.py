from family_kinship_ledger.services.dashboard import (
    DashboardBuilder,
    FamilyDashboard,
    TimelineEntry,
)
from family_kinship_ledger.services.health_indicators import (
    HealthIndicators,
    IntegrityTier,
    VerificationBucket,
    assess_health,
)
from family_kinship_ledger.services.structure_analysis import (
    PolygamyStatus,
    PolygamyTier,
    StructureClassification,
    StructureType,
    classify_structure,
)
from family_kinship_ledger.services.succession_readiness import (
    ReadinessLevel,
    Recommendation,
    RecommendationPriority,
    SuccessionReadiness,
    assess_succession_readiness,
)

__all__ = [
    "DashboardBuilder",
    "FamilyDashboard",
    "HealthIndicators",
    "IntegrityTier",
    "PolygamyStatus",
    "PolygamyTier",
    "ReadinessLevel",
    "Recommendation",
    "RecommendationPriority",
    "StructureClassification",
    "StructureType",
    "SuccessionReadiness",
    "TimelineEntry",
    "VerificationBucket",
    "assess_health",
    "assess_succession_readiness",
    "classify_structure",
]
