import datetime as dt
from types import MappingProxyType

import numpy as np

from foresight.models import (
    CustomerRecord,
    EngagementRecord,
    LeadRecord,
    OperationalRecord,
    Persona,
    RawBusinessData,
    RevenueRecord,
)
from foresight.providers import DataProvider

# Typical daily revenue per persona
BASE_REVENUE = MappingProxyType(
    {
        Persona.CONTRACTOR: 5000.0,
        Persona.PROPERTY_MANAGER: 3500.0,
        Persona.LOGISTICS: 6500.0,
        Persona.HEALTHCARE: 4000.0,
        Persona.SMB: 1500.0,
    }
)
# Relative weekday demand, Monday first
WEEKDAY_PROFILE = (1.1, 1.15, 1.1, 1.05, 1.0, 0.8, 0.8)


class MockDataProvider(DataProvider):
    """Synthetic records with trend, weekly seasonality and noise for every domain"""

    def __init__(self, seed: int | None = 42, daily_growth: float = 0.002, noise: float = 0.08):
        self.seed = seed
        self.daily_growth = daily_growth
        self.noise = noise

    def fetch(self, persona: Persona, lookback_days: int, analysis_date: dt.date) -> RawBusinessData:
        rng = np.random.default_rng(self.seed)
        persona = Persona(persona)
        days = [analysis_date - dt.timedelta(days=offset) for offset in range(lookback_days, -1, -1)]
        base = BASE_REVENUE[persona]

        revenue, leads, operations, engagement, customers = [], [], [], [], []
        for step, day in enumerate(days):
            seasonal = WEEKDAY_PROFILE[day.weekday()]
            value = base * (1 + self.daily_growth * step) * seasonal * (1 + rng.normal(0, self.noise))
            value = max(0.0, value)
            revenue.append(
                RevenueRecord(
                    date=day,
                    revenue=round(value, 2),
                    gross_margin=round(float(rng.uniform(0.35, 0.45)), 3),
                    refunds=round(value * float(rng.uniform(0.0, 0.03)), 2),
                )
            )
            rfq = int(rng.integers(5, 20))
            leads.append(
                LeadRecord(
                    date=day,
                    leads=int(rng.integers(8, 30)),
                    rfq_submissions=rfq,
                    wins=int(rng.binomial(rfq, 0.2)),
                )
            )
            operations.append(
                OperationalRecord(
                    date=day,
                    sla_met=round(float(rng.uniform(0.93, 0.99)), 3),
                    on_time=round(float(rng.uniform(0.92, 0.98)), 3),
                    cutoff_views=int(rng.integers(20, 80)),
                    freight_usage=round(float(rng.uniform(0.2, 0.35)), 3),
                )
            )
            engagement.append(
                EngagementRecord(
                    date=day,
                    email_open_rate=round(float(rng.uniform(0.2, 0.35)), 3),
                    email_click_rate=round(float(rng.uniform(0.02, 0.08)), 3),
                    site_sessions=int(rng.integers(100, 400)),
                    site_engagement=round(float(rng.uniform(0.3, 0.5)), 3),
                )
            )
            if day.weekday() == 0:
                customers.append(
                    CustomerRecord(
                        date=day,
                        reorders=int(rng.integers(1, 6)),
                        reorder_intervals=[round(float(v), 1) for v in rng.normal(40, 6, size=2)],
                        persona_mix={
                            "contractor": 0.35,
                            "property_manager": 0.25,
                            "logistics": 0.2,
                            "healthcare": 0.15,
                            "smb": 0.05,
                        },
                        product_mix={
                            "banners": 0.4,
                            "yard-signs": 0.25,
                            "decals": 0.15,
                            "ada-signs": 0.1,
                            "safety-signs": 0.1,
                        },
                    )
                )

        return RawBusinessData(
            revenue=revenue, leads=leads, customers=customers, operations=operations, engagement=engagement
        )
