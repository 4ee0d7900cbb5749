"""Exceptions raised by the workshop helpers.

Errors coming out of Spark itself (AnalysisException and friends) and
pydantic validation errors are not wrapped; they propagate as-is.
"""


class WorkshopError(Exception):
    """Base class for workshop errors."""


class RecordParseError(WorkshopError):
    """A text line could not be turned into an example record."""

    def __init__(self, line: str, reason: str):
        self.line = line
        self.reason = reason
        super().__init__(f"Cannot parse {line!r}: {reason}")


class DatasetOperationError(WorkshopError):
    """A Dataset helper was called with arguments it cannot use."""


class SlurmSubmissionError(WorkshopError):
    """sbatch failed or returned something we could not read."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


class EnvironmentCheckError(WorkshopError):
    """One or more setup checks failed."""

    def __init__(self, failures):
        self.failures = list(failures)
        details = "; ".join(f"{f.name}: {f.detail}" for f in self.failures)
        super().__init__(f"{len(self.failures)} environment check(s) failed: {details}")
