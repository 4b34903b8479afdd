"""Finding data model and severity grouping.

Findings and fixes are immutable inputs supplied by the caller. Severity is a
closed, ordered set whose order drives the category list shown on the main
screen. ``load_report`` decodes the JSON report shape produced by the checks.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class ReportError(ValueError):
    """Raised when a findings report cannot be decoded."""


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Priority position; lower ranks are listed first."""
        return SEVERITY_ORDER.index(self)

    @property
    def icon(self) -> str:
        return _SEVERITY_ICONS[self]

    @property
    def label(self) -> str:
        return _SEVERITY_LABELS[self]


SEVERITY_ORDER: tuple[Severity, ...] = (Severity.ERROR, Severity.WARNING, Severity.INFO)
_SEVERITY_ICONS = {Severity.ERROR: "x", Severity.WARNING: "!", Severity.INFO: "i"}
_SEVERITY_LABELS = {Severity.ERROR: "Errors", Severity.WARNING: "Warnings", Severity.INFO: "Info"}


class FixKind(Enum):
    AUTO = "auto"
    MANUAL = "manual"


@dataclass(frozen=True)
class Fix:
    description: str
    kind: FixKind = FixKind.MANUAL
    instructions: str | None = None


@dataclass(frozen=True)
class Finding:
    id: str
    title: str
    severity: Severity
    category: str
    message: str
    location: str | None = None
    line: int | None = None
    fixes: tuple[Fix, ...] = ()
    meta: Mapping[str, object] = field(default_factory=dict, compare=False, hash=False)

    @property
    def location_label(self) -> str | None:
        """Return ``path:line`` when a line is known, the bare path otherwise."""
        if not self.location:
            return None
        if self.line:
            return f"{self.location}:{self.line}"
        return self.location


@dataclass(frozen=True)
class Category:
    """Non-empty group of findings sharing one severity."""

    severity: Severity
    findings: tuple[Finding, ...]

    @property
    def label(self) -> str:
        return self.severity.label

    @property
    def count(self) -> int:
        return len(self.findings)


def group_by_severity(findings: Iterable[Finding]) -> tuple[Category, ...]:
    """Bucket findings by severity in priority order, omitting empty buckets.

    Findings keep their input order inside each bucket.
    """
    buckets: dict[Severity, list[Finding]] = {}
    for finding in findings:
        buckets.setdefault(finding.severity, []).append(finding)
    return tuple(
        Category(severity=severity, findings=tuple(buckets[severity]))
        for severity in sorted(buckets, key=lambda severity: severity.rank)
    )


def _require_str(entry: Mapping[str, object], key: str, where: str) -> str:
    value = entry.get(key)
    if not isinstance(value, str):
        raise ReportError(f"{where}: field {key!r} must be a string")
    return value


def _optional_str(entry: Mapping[str, object], key: str, where: str) -> str | None:
    value = entry.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ReportError(f"{where}: field {key!r} must be a string")
    return value


def _parse_fix(raw: object, where: str) -> Fix:
    if not isinstance(raw, Mapping):
        raise ReportError(f"{where}: fix must be an object")
    # The checks emit ``type``; ``kind`` is accepted as an alias.
    raw_kind = raw.get("type", raw.get("kind", FixKind.MANUAL.value))
    try:
        kind = FixKind(raw_kind)
    except ValueError as exc:
        raise ReportError(f"{where}: unknown fix type {raw_kind!r}") from exc
    return Fix(
        description=_require_str(raw, "description", where),
        kind=kind,
        instructions=_optional_str(raw, "instructions", where),
    )


def parse_finding(raw: object, index: int = 0) -> Finding:
    """Decode one finding object from report JSON."""
    where = f"result #{index}"
    if not isinstance(raw, Mapping):
        raise ReportError(f"{where}: expected an object")

    raw_severity = raw.get("severity")
    try:
        severity = Severity(raw_severity)
    except ValueError as exc:
        raise ReportError(f"{where}: unknown severity {raw_severity!r}") from exc

    line = raw.get("line")
    if line is not None and (isinstance(line, bool) or not isinstance(line, int)):
        raise ReportError(f"{where}: field 'line' must be an integer")

    raw_fixes = raw.get("fixes", [])
    if not isinstance(raw_fixes, list):
        raise ReportError(f"{where}: field 'fixes' must be a list")

    meta = raw.get("meta")
    return Finding(
        id=_optional_str(raw, "id", where) or "",
        title=_require_str(raw, "title", where),
        severity=severity,
        category=_optional_str(raw, "category", where) or "",
        message=_optional_str(raw, "message", where) or "",
        location=_optional_str(raw, "location", where),
        line=line,
        fixes=tuple(_parse_fix(fix, f"{where} fix #{pos}") for pos, fix in enumerate(raw_fixes)),
        meta=dict(meta) if isinstance(meta, Mapping) else {},
    )


def parse_findings(data: object) -> tuple[Finding, ...]:
    """Decode a report object (``{"results": [...]}``) or a bare findings list."""
    if isinstance(data, Mapping):
        data = data.get("results")
    if not isinstance(data, list):
        raise ReportError("report must be a list of findings or an object with a 'results' list")
    return tuple(parse_finding(entry, index) for index, entry in enumerate(data))


def load_report(path: Path) -> tuple[Finding, ...]:
    """Read and decode a JSON findings report from ``path``."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ReportError(f"not valid JSON: {exc}") from exc
    return parse_findings(data)
