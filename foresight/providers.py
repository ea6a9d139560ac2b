import datetime as dt
from abc import ABC, abstractmethod

from foresight.models import Persona, RawBusinessData


class DataProvider(ABC):
    """
    Source of raw business records for a prediction run.
    """

    @abstractmethod
    def fetch(self, persona: Persona, lookback_days: int, analysis_date: dt.date) -> RawBusinessData:
        """
        Fetch the records covering ``lookback_days`` up to ``analysis_date``.

        Args:
            persona: Customer segment being forecast
            lookback_days: Days of history required
            analysis_date: Last day of the window

        Returns:
            RawBusinessData for the window
        """
