from .errors import LaunchpadError
from .launch_config import LaunchConfig
from .profile import DEFAULT_PROFILE, Profile

__all__ = [
  "LaunchpadError",
  "LaunchConfig",
  "Profile",
  "DEFAULT_PROFILE",
]
