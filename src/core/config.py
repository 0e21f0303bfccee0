import os
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from dotenv import load_dotenv


# ==========================================================
# 1) Cargar .env raíz
# ==========================================================
load_dotenv(".env")
DEPLOY_ENV = os.getenv("DEPLOY_ENV", "prod").lower()

# ==========================================================
# 2) Cargar .env del entorno
# ==========================================================
ENV_PATH = f"DevOps/{DEPLOY_ENV}/.env"
load_dotenv(ENV_PATH, override=True)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=ENV_PATH,
        extra="allow"
    )

    # =========================
    #  App
    # =========================
    deploy_env: str = Field("prod", env="DEPLOY_ENV")
    app_name: str = Field("alpr-live-service", env="APP_NAME")
    app_env: str = Field("prod", env="APP_ENV")
    app_host: str = Field("0.0.0.0", env="APP_HOST")
    app_port: int = Field(8000, env="APP_PORT")
    log_level: str = Field("INFO", env="LOG_LEVEL")

    # =========================
    #  Pipeline
    # =========================
    confidence_threshold: float = Field(0.60, env="CONFIDENCE_THRESHOLD")
    binarize_threshold: int = Field(128, env="BINARIZE_THRESHOLD")
    recognizer_backend: str = Field("simulated", env="RECOGNIZER_BACKEND")
    localizer_backend: str = Field("none", env="LOCALIZER_BACKEND")

    # =========================
    #  OCR
    # =========================
    ocr_lang: str = Field("en", env="OCR_LANG")
    ocr_gpu: bool = Field(False, env="OCR_GPU")

    # =========================
    #  YOLO (localizador de placa)
    # =========================
    yolo_model_path: str = Field("./models/best.pt", env="YOLO_MODEL_PATH")
    yolo_conf: float = Field(0.5, env="YOLO_CONF")
    yolo_iou: float = Field(0.45, env="YOLO_IOU")

    # =========================
    #  Store
    # =========================
    store_backend: str = Field("memory", env="STORE_BACKEND")
    db_url: str = Field("sqlite:///alpr_plates.db", env="DB_URL")
    seed_demo_data: bool = Field(True, env="SEED_DEMO_DATA")
    recent_limit: int = Field(10, env="RECENT_LIMIT")

    # =========================
    #  Kafka
    # =========================
    kafka_enabled: bool = Field(False, env="KAFKA_ENABLED")
    kafka_broker: str = Field("kafka:9092", env="KAFKA_BROKER")
    kafka_topic_plate: str = Field("alpr-plate-events", env="KAFKA_TOPIC_PLATE")
    kafka_delivery_timeout: float = Field(10.0, env="KAFKA_DELIVERY_TIMEOUT")
    kafka_retry_attempts: int = Field(3, env="KAFKA_RETRY_ATTEMPTS")

    # =========================
    #  Monitoring
    # =========================
    metrics_enabled: bool = Field(True, env="METRICS_ENABLED")
    prometheus_port: int = Field(9100, env="PROMETHEUS_PORT")


settings = Settings()
