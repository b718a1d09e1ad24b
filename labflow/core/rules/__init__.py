"""
Quality gate and its configuration management.
"""

from .rule_config import GateConfig, GateConfigLoader, GateRuleBuilder, build_gate_rules
from .rule_engine import QUARANTINE_CODE, QUARANTINE_REASON, QualityGate

__all__ = [
    "QualityGate",
    "GateConfig",
    "GateConfigLoader",
    "GateRuleBuilder",
    "build_gate_rules",
    "QUARANTINE_CODE",
    "QUARANTINE_REASON",
]
