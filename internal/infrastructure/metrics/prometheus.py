"""
Prometheus Metrics for the Merchandise Catalog Service.

Defines all metrics for monitoring the service.
"""

from prometheus_client import Counter, Histogram

# HTTP
HTTP_REQUESTS_TOTAL = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status_code']
)

HTTP_REQUEST_DURATION = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# Product service
PRODUCT_OPERATIONS = Counter(
    'product_operations_total',
    'Product service operations',
    ['operation', 'outcome']  # outcome: success, not_found, duplicate, conflict, error
)

STOCK_ZERO_NOTIFICATIONS = Counter(
    'stock_zero_notifications_total',
    'Stock-zero notifications dispatched to the broker',
    ['status']  # sent, failed, skipped
)
