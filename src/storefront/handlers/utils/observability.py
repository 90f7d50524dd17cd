"""
Shared observability instances for the storefront service.

Every layer (handler, logic, data access, security) logs, traces and emits
metrics through the Powertools objects defined here so a single invocation
produces one correlated log stream and one EMF metrics blob.
"""

from aws_lambda_powertools.logging import Logger
from aws_lambda_powertools.metrics import Metrics, MetricUnit
from aws_lambda_powertools.tracing import Tracer

METRICS_NAMESPACE = 'Storefront'

# Service name comes from POWERTOOLS_SERVICE_NAME, level from LOG_LEVEL
logger: Logger = Logger()

# Disabled outside Lambda or when POWERTOOLS_TRACE_DISABLED is "true"
tracer: Tracer = Tracer()

# POWERTOOLS_METRICS_NAMESPACE overrides the namespace below
metrics: Metrics = Metrics(namespace=METRICS_NAMESPACE)


def count(name: str, value: float = 1) -> None:
    """Record a Count metric in the service namespace."""
    metrics.add_metric(name=name, unit=MetricUnit.Count, value=value)
