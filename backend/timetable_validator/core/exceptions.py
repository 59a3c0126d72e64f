class AppError(Exception):
    """Base class for all validator exceptions."""
    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

class ConfigurationError(AppError):
    """Raised when the validation policy or settings are invalid."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, details=details)

class ReferenceDataError(AppError):
    """Raised when a reference table cannot be read or parsed."""
    def __init__(self, filename: str, reason: str):
        super().__init__(f"Could not load {filename}: {reason}", details={"filename": filename})

class EntryDataError(AppError):
    """Raised when the timetable entry file is missing or holds invalid records."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, details=details)
