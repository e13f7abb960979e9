from cleantrack.compliance.policy import FullPeriodPolicy
from cleantrack.core.enums import Classification


def test_overachieved_takes_precedence():
    policy = FullPeriodPolicy()
    assert policy.classify(count=11, period_target=10, percentage=110) == Classification.OVERACHIEVED


def test_threshold_is_configurable():
    policy = FullPeriodPolicy(threshold_percent=50)
    assert policy.classify(count=6, period_target=10, percentage=60) == Classification.ON_TRACK
    assert policy.classify(count=4, period_target=10, percentage=40) == Classification.AT_RISK
