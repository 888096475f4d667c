"""
Core output coordination.
"""

from .output_coordinator import OutputCoordinator

__all__ = ["OutputCoordinator"]
