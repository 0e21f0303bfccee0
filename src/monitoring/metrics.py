import logging

from prometheus_client import Counter, Gauge, Histogram, start_http_server

logger = logging.getLogger(__name__)

# Resultado final de cada ejecución del pipeline
recognition_outcomes_total = Counter(
    "recognition_outcomes_total",
    "Ejecuciones del pipeline por estado terminal",
    ["outcome"]
)

# Registros persistidos
plates_persisted_total = Counter(
    "plates_persisted_total",
    "Total de placas persistidas",
    ["detection_type"]
)

# Latencia por etapa del pipeline
stage_latency = Histogram(
    "pipeline_stage_latency_seconds",
    "Tiempo de cada etapa del pipeline",
    ["stage"]
)

# Latencia total pipeline
pipeline_latency = Histogram(
    "pipeline_latency_seconds",
    "Tiempo total de una ejecución del pipeline"
)

# Visores conectados
live_subscribers = Gauge(
    "live_subscribers",
    "Suscriptores WebSocket conectados"
)

# Entregas fallidas a suscriptores
delivery_failures_total = Counter(
    "subscriber_delivery_failures_total",
    "Envíos fallidos a suscriptores"
)

def start_metrics_server(port: int = 9100):
    """Arranca servidor de métricas Prometheus."""
    start_http_server(port)
    logger.info("📊 Prometheus metrics disponible en :%d", port)
