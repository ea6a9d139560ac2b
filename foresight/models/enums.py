from enum import Enum


class Persona(str, Enum):
    """Customer segment that sets model defaults"""

    CONTRACTOR = "contractor"
    PROPERTY_MANAGER = "property_manager"
    LOGISTICS = "logistics"
    HEALTHCARE = "healthcare"
    SMB = "smb"


class Horizon(str, Enum):
    """Forecast horizon"""

    DAYS_14 = "14d"
    DAYS_30 = "30d"
    DAYS_60 = "60d"

    @property
    def days(self) -> int:
        return int(self.value.rstrip("d"))


class ForecastModelName(str, Enum):
    """Ensemble member models"""

    SEASONAL = "seasonal"
    EWMA = "ewma"
    AR = "ar"


class Severity(str, Enum):
    """Alert severity"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AlertActionType(str, Enum):
    """Delivery channel of an alert"""

    EMAIL = "email"
    HUBSPOT = "hubspot"
    WEBHOOK = "webhook"


class CFSITier(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    CRITICAL = "critical"


class ChurnTier(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


class NeedTier(str, Enum):
    """Likelihood that the anticipated window is actionable soon"""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ScoreTrend(str, Enum):
    """Direction of a score over recent history"""

    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"  # CFSI going down
    WORSENING = "worsening"  # churn risk going up


class ScoreKind(str, Enum):
    CFSI = "cfsi"
    CHURN = "churn"


class CreatorCheckStatus(str, Enum):
    PASSED = "passed"
    WARNING = "warning"
    FAILED = "failed"
