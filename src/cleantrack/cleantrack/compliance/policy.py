from __future__ import annotations

from abc import ABC, abstractmethod

from ..core.constants import AT_RISK_THRESHOLD_PERCENT
from ..core.enums import Classification


class CompliancePolicy(ABC):
    """Strategy Pattern: how a location's count is judged against its period target."""

    @abstractmethod
    def classify(self, *, count: int, period_target: int, percentage: int) -> Classification:
        raise NotImplementedError


class FullPeriodPolicy(CompliancePolicy):
    """Compare against the whole period target, however much of the period has elapsed.

    Order matters: overachieved first, then at-risk below the threshold.
    """

    def __init__(self, threshold_percent: int = AT_RISK_THRESHOLD_PERCENT):
        self._threshold = int(threshold_percent)

    def classify(self, *, count: int, period_target: int, percentage: int) -> Classification:
        if count > period_target:
            return Classification.OVERACHIEVED
        if percentage < self._threshold:
            return Classification.AT_RISK
        return Classification.ON_TRACK
