from typing import Any, TypeAlias

# Type aliases for common types
ErrorDetails: TypeAlias = dict[str, Any]
InvalidFields: TypeAlias = dict[str, Any]
DataDetails: TypeAlias = dict[str, Any]


class ForesightError(Exception):
    """Base exception for all foresight errors"""

    def __init__(self, message: str, details: ErrorDetails | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(ForesightError):
    """Exception raised when configuration or input validation fails"""

    def __init__(self, message: str, invalid_fields: InvalidFields | None = None) -> None:
        details = {"invalid_fields": invalid_fields or {}}
        super().__init__(message, details)
        self.invalid_fields = invalid_fields or {}


class DataError(ForesightError):
    """Exception raised for data-related issues"""

    def __init__(self, message: str, data_details: DataDetails | None = None) -> None:
        details = {"data_details": data_details or {}}
        super().__init__(message, details)
        self.data_details = data_details or {}


class MissingDataError(DataError):
    """Exception raised when required data is missing"""

    def __init__(self, message: str, missing_fields: list[str]) -> None:
        super().__init__(message, {"missing_fields": missing_fields})
        self.missing_fields = missing_fields


class InsufficientDataError(DataError):
    """Exception raised when a series is too short for a calculation"""

    def __init__(self, message: str, required: int, available: int) -> None:
        super().__init__(message, {"required": required, "available": available})
        self.required = required
        self.available = available


class CalculationError(ForesightError):
    """Exception raised when a calculation fails"""

    pass


class UnknownIdentifierError(ForesightError):
    """Exception raised when a persona, model name or rule id is not recognised"""

    def __init__(self, identifier: str, kind: str) -> None:
        super().__init__(f"Unknown {kind}: {identifier!r}", {"identifier": identifier, "kind": kind})
        self.identifier = identifier
        self.kind = kind


class ModelError(ForesightError):
    """Exception raised for forecast model errors"""

    def __init__(self, message: str, model_name: str, details: ErrorDetails | None = None):
        model_details = {"model_name": model_name, **(details or {})}
        super().__init__(message, model_details)
        self.model_name = model_name


class EnsembleError(ModelError):
    """Exception raised when no ensemble member could produce a forecast"""

    def __init__(self, message: str, failures: dict[str, str] | None = None):
        super().__init__(message, "ensemble", {"failures": failures or {}})
        self.failures = failures or {}


class ForecastGenerationError(ForesightError):
    """Exception raised when the pipeline cannot produce a forecast"""

    pass
