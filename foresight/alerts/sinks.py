"""
Alert delivery sinks.

The real email, CRM and webhook senders live outside this library. A sink is
the seam they plug into; the dispatcher routes each candidate to the sink
registered for its action type.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

from foresight.models import AlertActionType, AlertCandidate, DeliveryResult

logger = logging.getLogger(__name__)


class AlertSink(ABC):
    """
    Base class for all alert sinks.
    """

    action: AlertActionType

    @abstractmethod
    def deliver(self, action: AlertActionType, candidate: AlertCandidate) -> DeliveryResult:
        """
        Deliver a single alert candidate.

        Args:
            action: Channel the alert is routed to
            candidate: The approved alert to deliver

        Returns:
            DeliveryResult describing whether delivery succeeded
        """


class LoggingSink(AlertSink):
    """Sink that writes alerts to the log instead of an external channel"""

    def __init__(self, action: AlertActionType, level: int = logging.INFO):
        self.action = AlertActionType(action)
        self.level = level

    def deliver(self, action: AlertActionType, candidate: AlertCandidate) -> DeliveryResult:
        action = AlertActionType(action)
        logger.log(self.level, "[%s] %s (%s)", action.value, candidate.message, candidate.severity)
        return DeliveryResult(rule_id=candidate.rule_id, action=action, success=True)


class AlertDispatcher:
    """Routes alert candidates to the sink registered for their action type."""

    def __init__(self, sinks: Iterable[AlertSink] = ()):
        self.sinks: dict[str, AlertSink] = {}
        for sink in sinks:
            self.register(sink)

    @classmethod
    def with_logging_sinks(cls) -> "AlertDispatcher":
        return cls(LoggingSink(action) for action in AlertActionType)

    def register(self, sink: AlertSink) -> None:
        self.sinks[AlertActionType(sink.action).value] = sink

    def get_sink(self, action: "AlertActionType | str") -> AlertSink | None:
        return self.sinks.get(AlertActionType(action).value)

    def dispatch(self, candidates: Sequence[AlertCandidate]) -> list[DeliveryResult]:
        """
        Deliver each candidate; failures are reported in the results rather than raised.
        """
        results = []
        for candidate in candidates:
            sink = self.get_sink(candidate.action)
            if sink is None:
                results.append(
                    DeliveryResult(
                        rule_id=candidate.rule_id,
                        action=candidate.action,
                        success=False,
                        error=f"No sink registered for {candidate.action}",
                    )
                )
                continue
            try:
                results.append(sink.deliver(candidate.action, candidate))
            except Exception as exc:
                logger.exception("Alert delivery failed for rule %s", candidate.rule_id)
                results.append(
                    DeliveryResult(rule_id=candidate.rule_id, action=candidate.action, success=False, error=str(exc))
                )
        return results
