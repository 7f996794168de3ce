"""Prometheus metrics definitions."""

from prometheus_client import Counter

# Parser metrics
EXPRESSIONS_PARSED = Counter(
    "triggerexpr_expressions_parsed_total",
    "Total number of trigger expressions parsed",
    ["target_type", "status"],
)

TRIGGERS_BUILT = Counter(
    "triggerexpr_triggers_built_total",
    "Total number of triggers built",
    ["type_code"],
)

# Rule metrics
RULES_REGISTERED = Counter(
    "triggerexpr_rules_registered_total",
    "Total number of rule registration attempts",
    ["status"],
)
