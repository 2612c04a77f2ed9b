from ..metrics.registry import GATEWAY_OP_LATENCY_SECONDS, GATEWAY_OPS_TOTAL


def observe_gateway_op(table: str, op_type: str, status: str, latency_s: float) -> None:
    GATEWAY_OPS_TOTAL.labels(table=table, op_type=op_type, status=status).inc()
    GATEWAY_OP_LATENCY_SECONDS.labels(table=table, op_type=op_type).observe(latency_s)
