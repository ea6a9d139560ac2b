from .rules import (
    ALERT_RULES,
    RULE_EVALUATORS,
    SEVERITY_RANK,
    build_alert_rules,
    evaluate_alerts,
    summarize_alerts,
)
from .sinks import AlertDispatcher, AlertSink, LoggingSink

__all__ = [
    "ALERT_RULES",
    "RULE_EVALUATORS",
    "SEVERITY_RANK",
    "build_alert_rules",
    "evaluate_alerts",
    "summarize_alerts",
    "AlertSink",
    "LoggingSink",
    "AlertDispatcher",
]
