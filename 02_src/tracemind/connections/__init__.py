"""Connections module."""

from .store import ConnectionStore, IConnectionStore, ProviderFactory

__all__ = ["ConnectionStore", "IConnectionStore", "ProviderFactory"]
