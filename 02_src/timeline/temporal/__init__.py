"""Engine API client."""

from .client import ITemporalClient, TemporalClient

__all__ = ["ITemporalClient", "TemporalClient"]
