from .store import ProfileStorePort
from .source import RecordSourcePort

__all__ = [
    "ProfileStorePort",
    "RecordSourcePort",
]
