"""Application ports - interfaces for external adapters."""

from accessgraph.application.ports.clock import Clock
from accessgraph.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "Clock",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
