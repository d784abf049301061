from .models import CrowdConfig
from .manager import ConfigManager

__all__ = ["CrowdConfig", "ConfigManager"]
