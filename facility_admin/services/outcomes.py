"""
Typed outcomes returned by the report services.

Services never raise to their callers; they hand back one of these.
Check ``outcome.ok`` first, then read ``value`` or ``message``.
"""
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Ok:
    value: Any = None
    ok = True
    message = None


@dataclass(frozen=True)
class QueryFailed:
    message: str
    ok = False


@dataclass(frozen=True)
class NotFound:
    id: str
    ok = False

    @property
    def message(self):
        return f'Report {self.id} not found'


@dataclass(frozen=True)
class StoreFailure:
    message: str
    ok = False


@dataclass(frozen=True)
class ValidationError:
    reason: str
    ok = False

    @property
    def message(self):
        return self.reason


@dataclass(frozen=True)
class ReportChange:
    """Fields written to one report, as applied to the store."""
    report_id: str
    fields: dict = field(default_factory=dict)


@dataclass(frozen=True)
class ReportRemoved:
    report_id: str
