# Namespace for pipeline steps
from .parse_files import ParseProfileFiles  # noqa: F401
from .load_profiles import LoadProfiles  # noqa: F401
from .process_profiles import ProcessProfiles  # noqa: F401
from .log_imports import LogImports  # noqa: F401
