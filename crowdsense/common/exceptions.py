class CrowdSenseError(Exception):
    """Base exception for all crowd analysis errors."""
    pass


class DataSourceError(CrowdSenseError):
    """Raised when an external data source (database, weather API) is unavailable."""
    pass


class ConfigurationError(CrowdSenseError):
    """Raised when configuration is invalid."""
    pass


class InvalidSettingError(CrowdSenseError):
    """Raised when an admin setting has an unknown key or a malformed value."""
    pass
