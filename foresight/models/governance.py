from pydantic import Field

from foresight.models.common import BaseModel, CamelModel
from foresight.models.enums import CreatorCheckStatus


class AuditResult(CamelModel):
    """Outcome of a single governance audit.

    ``notes`` explain the verdict; ``advisory_notes`` are findings that do not
    affect it.
    """

    name: str
    passed: bool
    notes: list[str] = Field(default_factory=list)
    advisory_notes: list[str] = Field(default_factory=list)


class CreatorCheck(CamelModel):
    """Combined governance verdict"""

    passed: bool
    notes: list[str] = Field(default_factory=list)
    audits: list[AuditResult] = Field(default_factory=list)


class CreatorCheckSummary(BaseModel):
    status: CreatorCheckStatus
    summary: str
    action_required: str
    failed_checks: list[str] = Field(default_factory=list)
