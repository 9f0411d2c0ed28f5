# Custom exceptions for cflagsdb

class CflagsError(Exception):
    """Base exception for all application-specific errors."""
    pass

class StoreOpenError(CflagsError):
    """Raised when the flags database cannot be opened or its schema created."""
    def __init__(self, db_path: str, message: str):
        self.db_path = db_path
        self.message = message
        super().__init__(f"Cannot open flags database {db_path}: {message}")

class ConfigError(CflagsError):
    """Raised for configuration-related problems."""
    pass
