"""Prometheus metrics for the AI service"""

from prometheus_client import Counter, Histogram

SUMMARY_REQUESTS = Counter(
    "ai_summary_requests_total",
    "Summary requests by entity kind and where the text came from",
    ["kind", "source"],
)

LLM_CALLS = Counter(
    "ai_llm_calls_total",
    "Upstream completion calls by outcome",
    ["outcome"],
)

LLM_LATENCY = Histogram(
    "ai_llm_call_seconds",
    "Latency of upstream completion calls",
)

TASK_DRAFTS = Counter(
    "ai_task_drafts_total",
    "Task drafts by parser used",
    ["source"],
)
