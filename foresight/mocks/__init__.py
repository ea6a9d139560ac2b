from .provider import MockDataProvider

__all__ = ["MockDataProvider"]
