from prometheus_client import Counter, Histogram

GATEWAY_OPS_TOTAL = Counter(
    "tablegw_gateway_ops_total",
    "Table gateway operations by table, operation type and outcome.",
    ["table", "op_type", "status"],
)

GATEWAY_OP_LATENCY_SECONDS = Histogram(
    "tablegw_gateway_op_latency_seconds",
    "Latency of table gateway operations, including SQL round trips.",
    ["table", "op_type"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)
