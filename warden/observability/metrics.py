"""Prometheus metrics for Warden.

Turn outcomes, critique activity, context augmentation, tool execution
and model token usage.
"""

from prometheus_client import Counter, Histogram, start_http_server

# Turn metrics
TURNS = Counter(
    "warden_turns_total",
    "Total number of turns processed",
    labelnames=["tenant_id", "reason_code"],
)

TURN_LATENCY = Histogram(
    "warden_turn_latency_seconds",
    "End-to-end turn latency in seconds",
    labelnames=["tenant_id"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

MODEL_CALLS_PER_TURN = Histogram(
    "warden_model_calls_per_turn",
    "Number of model calls issued per turn",
    labelnames=["tenant_id"],
    buckets=(1, 2, 3, 4, 5, 6, 8, 10, 15),
)

# Critique metrics
CRITIQUE_TRIGGERED = Counter(
    "warden_critique_triggered_total",
    "Critique gate triggers, by trigger reason",
    labelnames=["tenant_id", "trigger"],
)

CRITIQUE_DECISIONS = Counter(
    "warden_critique_decisions_total",
    "Critique verdicts, by decision",
    labelnames=["tenant_id", "decision"],
)

CRITIQUE_FAILURES = Counter(
    "warden_critique_failures_total",
    "Critique attempts that failed to produce a verdict",
    labelnames=["tenant_id", "error_type"],
)

# Context augmentation metrics
CONTEXT_FETCHES = Counter(
    "warden_context_fetches_total",
    "Context augmentation iterations",
    labelnames=["tenant_id", "outcome"],
)

# Policy metrics
POLICY_BLOCKS = Counter(
    "warden_policy_blocks_total",
    "Assessments blocked by a policy hard stop",
    labelnames=["tenant_id", "reason_code"],
)

# Tool metrics
TOOL_EXECUTIONS = Counter(
    "warden_tool_executions_total",
    "Tool executions through the gateway",
    labelnames=["action", "status"],
)

TOOL_LATENCY = Histogram(
    "warden_tool_latency_seconds",
    "Tool execution latency in seconds",
    labelnames=["action"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

# Escalation metrics
ESCALATIONS = Counter(
    "warden_escalations_total",
    "Turns handed off to a human operator",
    labelnames=["tenant_id"],
)

# LLM metrics
LLM_TOKENS = Counter(
    "warden_llm_tokens_total",
    "Total LLM tokens used",
    labelnames=["step", "model", "direction"],
)

LLM_ERRORS = Counter(
    "warden_llm_errors_total",
    "Model calls that failed after all fallbacks",
    labelnames=["step", "error_type"],
)


def setup_metrics(enabled: bool = True, port: int = 9090) -> None:
    """Expose metrics over HTTP.

    Metrics are registered when this module is imported; this only starts
    the scrape endpoint.
    """
    if enabled:
        start_http_server(port)
