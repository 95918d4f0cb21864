from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum


class RiskCategory(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class ScoreResult:
    """
    Outcome of one scoring system for one snapshot.

    score, risk_level and breakdown are all None exactly when the snapshot
    is missing a field the scoring system requires.
    """
    score: Optional[int]
    risk_level: Optional[RiskCategory]
    is_complete: bool
    breakdown: Optional[Dict[str, int]]

    @classmethod
    def incomplete(cls) -> 'ScoreResult':
        return cls(score=None, risk_level=None, is_complete=False, breakdown=None)

    def summary(self) -> 'ScoreSummary':
        return ScoreSummary(score=self.score, risk_level=self.risk_level, is_complete=self.is_complete)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "risk_level": self.risk_level.value if self.risk_level else None,
            "is_complete": self.is_complete,
            "breakdown": dict(self.breakdown) if self.breakdown is not None else None,
        }


@dataclass(frozen=True)
class ScoreSummary:
    score: Optional[int]
    risk_level: Optional[RiskCategory]
    is_complete: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "risk_level": self.risk_level.value if self.risk_level else None,
            "is_complete": self.is_complete,
        }


@dataclass(frozen=True)
class CalculationResults:
    """NEWS2 and q-SOFA summaries computed from the same snapshot."""
    news2: ScoreSummary
    qsofa: ScoreSummary

    def to_dict(self) -> Dict[str, Any]:
        return {"news2": self.news2.to_dict(), "qsofa": self.qsofa.to_dict()}


@dataclass(frozen=True)
class DetailedResults:
    news2: ScoreResult
    qsofa: ScoreResult

    def to_dict(self) -> Dict[str, Any]:
        return {"news2": self.news2.to_dict(), "qsofa": self.qsofa.to_dict()}


@dataclass
class DataCompleteness:
    is_complete: bool
    missing_fields: List[str] = field(default_factory=list)
    completion_percentage: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_complete": self.is_complete,
            "missing_fields": list(self.missing_fields),
            "completion_percentage": self.completion_percentage,
        }


class VitalScoresError(Exception):
    """Base exception for vital scores engine errors"""
    pass


class UnknownVitalSignError(VitalScoresError, ValueError):
    """Raised when an update names a field that is not a vital sign"""
    pass
