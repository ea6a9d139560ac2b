from .anticipated_need import calculate_anticipated_need, default_anticipated_need, interpret_anticipated_need
from .cfsi import NEUTRAL_SUBSCORE, calculate_cfsi, calculate_cfsi_components, classify_cfsi
from .churn import DEFAULT_CHURN_RISK, calculate_churn_factors, calculate_churn_risk, classify_churn
from .trends import analyze_score_trend

__all__ = [
    "calculate_cfsi",
    "calculate_cfsi_components",
    "classify_cfsi",
    "NEUTRAL_SUBSCORE",
    "calculate_churn_risk",
    "calculate_churn_factors",
    "classify_churn",
    "DEFAULT_CHURN_RISK",
    "calculate_anticipated_need",
    "default_anticipated_need",
    "interpret_anticipated_need",
    "analyze_score_trend",
]
