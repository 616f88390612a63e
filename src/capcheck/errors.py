"""Exceptions raised by capcheck."""


class CapcheckError(Exception):
    """Base class for capcheck errors."""


class UnknownSuiteError(CapcheckError):
    def __init__(self, name: str, available: list[str]) -> None:
        super().__init__(f"Unknown suite: {name}. Available: {', '.join(available)}")
        self.name = name
        self.available = available


class SuiteFileError(CapcheckError):
    """Suite file is missing or malformed."""
