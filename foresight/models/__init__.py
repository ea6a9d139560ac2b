from .alerts import AlertCandidate, AlertRule, AlertSummary, DeliveryResult
from .common import BaseModel, CamelModel
from .enums import (
    AlertActionType,
    CFSITier,
    ChurnTier,
    CreatorCheckStatus,
    ForecastModelName,
    Horizon,
    NeedTier,
    Persona,
    ScoreKind,
    ScoreTrend,
    Severity,
)
from .features import (
    CustomerRecord,
    EngagementRecord,
    FeatureSet,
    LeadRecord,
    OperationalRecord,
    RawBusinessData,
    RevenueRecord,
)
from .forecasting import (
    EnsembleForecast,
    ForecastAccuracy,
    ForecastPoint,
    ForecastValidation,
    ModelFit,
    ModelSelection,
    SeasonalityProfile,
)
from .governance import AuditResult, CreatorCheck, CreatorCheckSummary
from .output import ForecastDiagnostics, ForecastOutput
from .scores import (
    AnticipatedNeed,
    CFSIComponents,
    CFSIResult,
    ChurnFactors,
    ChurnResult,
    ScoreTrendAnalysis,
)

__all__ = [
    # Base
    "BaseModel",
    "CamelModel",
    # Enums
    "AlertActionType",
    "CFSITier",
    "ChurnTier",
    "CreatorCheckStatus",
    "ForecastModelName",
    "Horizon",
    "NeedTier",
    "Persona",
    "ScoreKind",
    "ScoreTrend",
    "Severity",
    # Features
    "CustomerRecord",
    "EngagementRecord",
    "FeatureSet",
    "LeadRecord",
    "OperationalRecord",
    "RawBusinessData",
    "RevenueRecord",
    # Forecasting
    "EnsembleForecast",
    "ForecastAccuracy",
    "ForecastPoint",
    "ForecastValidation",
    "ModelFit",
    "ModelSelection",
    "SeasonalityProfile",
    # Scores
    "AnticipatedNeed",
    "CFSIComponents",
    "CFSIResult",
    "ChurnFactors",
    "ChurnResult",
    "ScoreTrendAnalysis",
    # Alerts
    "AlertCandidate",
    "AlertRule",
    "AlertSummary",
    "DeliveryResult",
    # Governance
    "AuditResult",
    "CreatorCheck",
    "CreatorCheckSummary",
    # Output
    "ForecastDiagnostics",
    "ForecastOutput",
]
