from enum import Enum

from pydantic import BaseModel, ConfigDict


class Severity(str, Enum):
    """Enumerates the severity levels of a security rule."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class Finding(BaseModel):
    """A single violation: one rule's metadata paired with the resource that triggered it."""

    model_config = ConfigDict(frozen=True)

    severity: Severity
    category: str
    resource: str
    message: str
    remediation: str = ""


class FindingSummary(BaseModel):
    """Counts of findings for a run, broken down by severity."""

    total: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0

    @classmethod
    def from_findings(cls, findings: list[Finding]) -> "FindingSummary":
        summary = cls(total=len(findings))
        for finding in findings:
            if finding.severity == Severity.HIGH:
                summary.high += 1
            elif finding.severity == Severity.MEDIUM:
                summary.medium += 1
            else:
                summary.low += 1
        return summary
