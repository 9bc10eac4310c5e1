"""Prometheus metrics for SMS parse outcomes, AI fallbacks and insights generation"""

from prometheus_client import Counter, Histogram

from dhanrakshak.domain.resolution import Resolution

# SMS parsing
sms_parse_counter = Counter(
    "dhanrakshak_sms_parse_total",
    "SMS parse attempts by outcome",
    ["outcome", "method"],  # outcome: parsed | spam | failure reason; method: AI | REGEX | none
)

ai_fallback_counter = Counter(
    "dhanrakshak_ai_fallback_total",
    "AI collaborator results replaced by the regex extractor",
    ["reason"],  # UNAVAILABLE | AI_MALFORMED_RESPONSE | AI_VALIDATION_FAILED
)

# Insights
insights_counter = Counter(
    "dhanrakshak_insights_total",
    "Portfolio insights reports generated",
    ["narrative_source"],  # AI | HEURISTIC
)

suggestion_count_histogram = Histogram(
    "dhanrakshak_suggestions_per_report",
    "Number of suggestions fired per report",
    buckets=[0, 1, 2, 3, 4, 5],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_parse(resolution: Resolution) -> None:
    """Record parse outcome and, if the AI stage was rejected, the fallback reason"""
    result = resolution.result
    if result.ok:
        outcome = "spam" if result.transaction.is_spam else "parsed"
        method = result.transaction.parse_method.value
    else:
        outcome = result.failure.value
        method = "none"
    sms_parse_counter.labels(outcome=outcome, method=method).inc()

    if resolution.ai_failure is not None:
        ai_fallback_counter.labels(reason=resolution.ai_failure.value).inc()


def record_insights(narrative_source: str, suggestion_count: int) -> None:
    insights_counter.labels(narrative_source=narrative_source).inc()
    suggestion_count_histogram.observe(suggestion_count)
