from .env import settings_from_env
from .settings import TokenCoreSettings

__all__ = ["TokenCoreSettings", "settings_from_env"]
