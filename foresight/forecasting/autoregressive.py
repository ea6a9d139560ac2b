import numpy as np

from foresight.config import PipelineConfig
from foresight.exceptions import ModelError, ValidationError
from foresight.forecasting.base import Z_SCORES, ForecastModel
from foresight.models import ForecastModelName, ModelFit

# Largest characteristic root modulus accepted; 1 admits unit-root persistence
MAX_ROOT_MODULUS = 1.01


class ARModel(ForecastModel):
    """Autoregressive model of fixed order fitted by least squares on lagged values.

    There is no intercept term. Multi-step forecasts feed each prediction back
    in as a lag, and the band widens with the square root of the step. A fit
    whose recursion would grow without bound is rejected.
    """

    name = ForecastModelName.AR

    def __init__(
        self, config: PipelineConfig | None = None, rng: np.random.Generator | None = None, order: int | None = None
    ) -> None:
        super().__init__(config, rng)
        self.order = self.config.ar_order if order is None else order

    @property
    def min_history(self) -> int:
        return self.order + 1

    def _fit(self, values: np.ndarray) -> ModelFit:
        p = self.order
        # row t holds [y(t-1), ..., y(t-p)]
        lagged = np.column_stack([values[p - k - 1 : values.size - k - 1] for k in range(p)])
        target = values[p:]
        coefficients, *_ = np.linalg.lstsq(lagged, target, rcond=None)
        self._check_stability(coefficients)
        fitted = lagged @ coefficients
        return ModelFit(
            model_name=self.name,
            history=values.tolist(),
            fitted=values[:p].tolist() + fitted.tolist(),
            residuals=(target - fitted).tolist(),
            coefficients=coefficients.tolist(),
        )

    def _predict(self, fit: ModelFit, horizon_days: int, confidence_level: float):
        if confidence_level not in Z_SCORES:
            raise ValidationError(
                "Unsupported confidence level", {"confidence_level": confidence_level, "supported": list(Z_SCORES)}
            )
        coefficients = np.asarray(fit.coefficients)
        lags = list(fit.history[-self.order :])
        points = []
        for _ in range(horizon_days):
            # most recent lag first
            value = float(np.dot(coefficients, lags[::-1]))
            points.append(value)
            lags = lags[1:] + [value]

        points = np.asarray(points)
        residual_std = float(np.std(fit.residuals)) if fit.residuals else 0.0
        band = Z_SCORES[confidence_level] * residual_std * np.sqrt(np.arange(1, horizon_days + 1))
        return points, points - band, points + band

    def _check_stability(self, coefficients: np.ndarray) -> None:
        """
        Reject coefficients whose recursive forecast explodes.

        Roots of z^p - phi_1 z^(p-1) - ... - phi_p must lie inside the unit
        circle, up to ``MAX_ROOT_MODULUS``.

        Raises:
            ModelError: If any root lies outside that bound
        """
        roots = np.roots(np.r_[1.0, -coefficients])
        modulus = float(np.max(np.abs(roots))) if roots.size else 0.0
        if not np.isfinite(modulus) or modulus > MAX_ROOT_MODULUS:
            raise ModelError(
                "Unstable autoregressive coefficients",
                self.name.value,
                {"coefficients": coefficients.tolist(), "max_root_modulus": modulus},
            )
