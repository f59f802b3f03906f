"""Channel health probing, verdict storage, and filtering."""

from .orchestrator import DEFAULT_BATCH_SIZE, HealthBatchOrchestrator
from .prober import HealthProber
from .store import HealthFilter, HealthPolicy, HealthRecordStore

__all__ = [
    "HealthProber",
    "HealthRecordStore",
    "HealthFilter",
    "HealthPolicy",
    "HealthBatchOrchestrator",
    "DEFAULT_BATCH_SIZE",
]
