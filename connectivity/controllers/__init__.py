"""
Connectivity Controllers Package

High-level coordination for connectivity monitoring.
"""

from connectivity.controllers.connectivity_manager import (
    ConnectivityChangedCallback,
    ConnectivityManager,
)

__all__ = [
    "ConnectivityChangedCallback",
    "ConnectivityManager",
]
