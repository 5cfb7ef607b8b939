"""Mini README: Core package initializer for the gift ledger.

The package records gifts given to and received from contacts and keeps a
running balance per contact. Subpackages:

    * ledger - data model, pure transaction engine and name resolution.
    * storage - codec and single-slot persistence.
    * export - dated backup export and import.
    * analytics - dashboard and chart aggregations.
    * interface - FastAPI service.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
