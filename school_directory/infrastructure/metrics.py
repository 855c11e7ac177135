from prometheus_client import Counter, Histogram, generate_latest
from fastapi import Response

# Метрики для HTTP запросов
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint']
)

# Метрики справочника
identities_created_total = Counter(
    'identities_created_total',
    'Identities created on first reference',
    ['role']
)
persistence_errors_total = Counter('persistence_errors_total', 'Failed database writes')
notification_recipients = Histogram(
    'notification_recipients',
    'Recipients resolved per notification',
    buckets=(0, 1, 5, 10, 25, 50, 100, 250, 1000)
)

def metrics_endpoint():
    """Endpoint для Prometheus метрик"""
    return Response(content=generate_latest(), media_type="text/plain")
