# boundless/metrics.py
from prometheus_client import Counter, Histogram, CollectorRegistry

# Dedicated registry so reloads and repeated app factories do not collide
REGISTRY = CollectorRegistry(auto_describe=True)

GRADES = Counter(
    "boundless_grades_total",
    "Number of judge grades stored",
    ["outcome"],
    registry=REGISTRY,
)

PUBLISH_ATTEMPTS = Counter(
    "boundless_publish_attempts_total",
    "Number of hackathon publish attempts",
    ["outcome"],
    registry=REGISTRY,
)

NOTIFICATIONS = Counter(
    "boundless_notifications_total",
    "Number of notification deliveries",
    ["outcome"],
    registry=REGISTRY,
)

NOTIFICATION_LATENCY = Histogram(
    "boundless_notification_latency_seconds",
    "Latency of notification deliveries in seconds",
    registry=REGISTRY,
)
