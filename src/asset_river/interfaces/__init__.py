"""
Interfaces Layer - Abstract Protocols for Dependencies.

This package defines the abstract interfaces (using typing.Protocol) for
external collaborators. High-level modules depend on these abstractions,
not on concrete implementations.

Protocols:
    - AssetRepository: Per-user asset collection storage

Design Principles:
    - Use typing.Protocol (not ABC) for Pythonic interfaces
    - Interface Segregation: Small, focused interfaces
    - All methods have clear contracts in docstrings
"""

from asset_river.interfaces.asset_repository import AssetRepository

__all__ = ["AssetRepository"]
