"""
Persona profiles: the per-segment constants that default and adjust the scores.
"""

from types import MappingProxyType

from foresight.exceptions import UnknownIdentifierError
from foresight.models import BaseModel, Persona


class PersonaProfile(BaseModel):
    persona: Persona
    base_churn_risk: float
    churn_adjustment: float
    reorder_interval_days: float
    window_start_offset_days: int
    window_end_offset_days: int
    base_confidence: float
    signals: tuple[str, ...]


PERSONA_PROFILES = MappingProxyType(
    {
        Persona.CONTRACTOR: PersonaProfile(
            persona=Persona.CONTRACTOR,
            base_churn_risk=0.3,
            churn_adjustment=1.0,
            reorder_interval_days=45,
            window_start_offset_days=-7,
            window_end_offset_days=14,
            base_confidence=0.6,
            signals=("Project cycle analysis", "Seasonal construction patterns", "Workload indicators"),
        ),
        Persona.PROPERTY_MANAGER: PersonaProfile(
            persona=Persona.PROPERTY_MANAGER,
            base_churn_risk=0.2,
            churn_adjustment=0.8,
            reorder_interval_days=60,
            window_start_offset_days=-3,
            window_end_offset_days=7,
            base_confidence=0.8,
            signals=("Budget cycle timing", "Tenant turnover patterns", "Maintenance schedule alignment"),
        ),
        Persona.LOGISTICS: PersonaProfile(
            persona=Persona.LOGISTICS,
            base_churn_risk=0.4,
            churn_adjustment=1.2,
            reorder_interval_days=30,
            window_start_offset_days=-14,
            window_end_offset_days=21,
            base_confidence=0.4,
            signals=("Demand forecast trends", "Inventory level indicators", "Supply chain disruptions"),
        ),
        Persona.HEALTHCARE: PersonaProfile(
            persona=Persona.HEALTHCARE,
            base_churn_risk=0.1,
            churn_adjustment=0.6,
            reorder_interval_days=90,
            window_start_offset_days=-5,
            window_end_offset_days=10,
            base_confidence=0.7,
            signals=("Compliance deadline tracking", "Audit schedule alignment", "Regulatory change impacts"),
        ),
        Persona.SMB: PersonaProfile(
            persona=Persona.SMB,
            base_churn_risk=0.5,
            churn_adjustment=1.3,
            reorder_interval_days=60,
            window_start_offset_days=-7,
            window_end_offset_days=14,
            base_confidence=0.5,
            signals=("Cash flow indicators", "Growth stage analysis", "Market condition impacts"),
        ),
    }
)


def resolve_persona(persona: "Persona | str") -> Persona:
    """Coerce a persona label, raising UnknownIdentifierError when it is not recognised."""
    try:
        return Persona(persona)
    except ValueError as exc:
        raise UnknownIdentifierError(str(persona), "persona") from exc


def get_persona_profile(persona: "Persona | str") -> PersonaProfile:
    return PERSONA_PROFILES[resolve_persona(persona)]
