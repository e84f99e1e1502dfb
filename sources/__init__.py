# Importing the modules registers their sources
from . import files  # noqa: F401
from . import profile_api  # noqa: F401
from . import sample_profiles  # noqa: F401
