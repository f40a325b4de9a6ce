"""Services"""

from skillforge.services.dashboard import DashboardLoader, DashboardSnapshot
from skillforge.services.data_service import (
    DataService,
    InterviewSaveError,
    RecordNotFoundError,
    build_data_service,
)
from skillforge.services.persistence import (
    LocalPersistence,
    PersistenceError,
    PersistenceProvider,
    RemotePersistence,
    select_persistence,
)
from skillforge.services.remote_backend import FirebaseRealtimeBackend, RemoteBackend
from skillforge.services.stats import compute_stats

__all__ = [
    "DashboardLoader",
    "DashboardSnapshot",
    "DataService",
    "build_data_service",
    "InterviewSaveError",
    "RecordNotFoundError",
    "LocalPersistence",
    "PersistenceError",
    "PersistenceProvider",
    "RemotePersistence",
    "select_persistence",
    "FirebaseRealtimeBackend",
    "RemoteBackend",
    "compute_stats",
]
