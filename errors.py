# errors.py
from __future__ import annotations


class WindCalcError(Exception):
    """Base class for calculator errors the UI can report and recover from."""


class ValidationError(WindCalcError):
    """Required user input is empty or missing (e.g. no scenario name)."""


class NotFoundError(WindCalcError):
    """Index-based scenario lookup or delete fell outside the stored list."""


class StorageCorruptError(WindCalcError):
    """The persisted scenario blob could not be decoded."""


class ExportError(WindCalcError):
    """Chart image or PDF report generation failed."""
