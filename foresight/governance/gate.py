import datetime as dt
import logging

from foresight.config import PipelineConfig
from foresight.governance.audits import AUDITS
from foresight.models import CreatorCheck, CreatorCheckStatus, CreatorCheckSummary, ForecastOutput, Severity

logger = logging.getLogger(__name__)


def run_creator_check(
    output: ForecastOutput, config: PipelineConfig | None = None, now: dt.datetime | None = None
) -> CreatorCheck:
    """
    Run every governance audit over a forecast output.

    The verdict passes only when all audits pass. Notes are collected in audit
    order, each audit's verdict notes followed by its advisory notes.
    """
    config = config or PipelineConfig()
    now = now or dt.datetime.now(dt.timezone.utc)
    results = [audit(output, config, now) for audit in AUDITS]
    passed = all(result.passed for result in results)
    notes = [note for result in results for note in (*result.notes, *result.advisory_notes)]
    if not passed:
        failed = [result.name for result in results if not result.passed]
        logger.warning("Creator check failed: %s", ", ".join(failed))
    return CreatorCheck(passed=passed, notes=notes, audits=results)


def apply_creator_check(output: ForecastOutput, check: CreatorCheck) -> ForecastOutput:
    """Attach the verdict; a failed verdict narrows the alerts to critical severity."""
    alerts = output.alerts if check.passed else [a for a in output.alerts if a.severity == Severity.CRITICAL.value]
    return output.model_copy(update={"creator_check": check, "alerts": alerts})


def summarize_creator_check(check: CreatorCheck) -> CreatorCheckSummary:
    failed = [audit.name for audit in check.audits if not audit.passed]
    if failed:
        return CreatorCheckSummary(
            status=CreatorCheckStatus.FAILED,
            summary=f"{len(failed)} governance check(s) failed",
            action_required="Review and revise content before deployment; only critical alerts were kept",
            failed_checks=failed,
        )
    if any(audit.advisory_notes for audit in check.audits):
        return CreatorCheckSummary(
            status=CreatorCheckStatus.WARNING,
            summary="All governance checks passed with advisory notes",
            action_required="Review advisory notes before deployment",
        )
    return CreatorCheckSummary(
        status=CreatorCheckStatus.PASSED,
        summary="All governance checks passed",
        action_required="No action required",
    )
