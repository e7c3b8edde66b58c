"""
Admission chances service.

The logic package is imported first so the snapshot and ai packages always
see a fully initialized set of constants and contracts.
"""

from .logic import ChancesEngine, ChancesRepository, ChancesResult, ChancesMode

__all__ = ["ChancesEngine", "ChancesRepository", "ChancesResult", "ChancesMode"]
