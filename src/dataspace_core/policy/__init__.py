"""Policy gate capability."""

from dataspace_core.policy.pep import (
    AllowAllPolicyGate,
    OPAPolicyGate,
    PolicyDecision,
    PolicyGate,
    build_policy_gate,
)

__all__ = [
    "AllowAllPolicyGate",
    "OPAPolicyGate",
    "PolicyDecision",
    "PolicyGate",
    "build_policy_gate",
]
