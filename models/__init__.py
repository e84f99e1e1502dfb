from .raw_profile import RawProfile, ExperienceEntry, EducationEntry
from .stored_profile import StoredProfile, ValidationIssue
from .field_change import FieldChange
from .etl_run import EtlRun, RunCounters
from .run_summary import RecordOutcome, RunSummary
from .profile_image import ProfileImage
from .import_log import ImportLogEntry

__all__ = [
    "RawProfile",
    "ExperienceEntry",
    "EducationEntry",
    "StoredProfile",
    "ValidationIssue",
    "FieldChange",
    "EtlRun",
    "RunCounters",
    "RecordOutcome",
    "RunSummary",
    "ProfileImage",
    "ImportLogEntry",
]
