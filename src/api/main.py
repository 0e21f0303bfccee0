# src/api/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request, WebSocket, WebSocketDisconnect
from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.api.schemas import HealthResponse, PlateUpdateRequest, ScanRequest, ValidateRequest
from src.application.plate_stats_service import compute_daily_stats
from src.application.service_factory import ServiceContainer, build_services
from src.core.config import settings
from src.domain.exceptions import DecodeError, PersistenceError
from src.domain.Models.recognition_outcome import RecognitionOutcome
from src.infrastructure.Imaging.opencv_image_preprocessor import decode_image_payload
from src.infrastructure.Messaging.websocket_broadcaster import WebSocketSubscriber

logger = logging.getLogger(__name__)


def create_app(services: Optional[ServiceContainer] = None) -> FastAPI:
    services = services or build_services()

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        yield
        services.close()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.services = services

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError):
        logger.error("PersistenceError en %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"error": "Failed to persist plate"})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())})

    @app.get("/health", response_model=HealthResponse)
    def health_check():
        return HealthResponse(env=settings.app_env, subscribers=services.broadcaster.subscriber_count)

    # ============================================================
    # Placas
    # ============================================================

    @app.get("/api/plates/recent")
    async def recent_plates(limit: int = Query(settings.recent_limit, ge=0, le=500)):
        records = await run_in_threadpool(services.repository.get_recent, limit)
        return [r.to_dict() for r in records]

    @app.get("/api/plates/{plate_id}")
    async def get_plate(plate_id: int):
        record = await run_in_threadpool(services.repository.get_by_id, plate_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Plate not found")
        return record.to_dict()

    @app.patch("/api/plates/{plate_id}")
    async def update_plate(plate_id: int, body: PlateUpdateRequest):
        record = await run_in_threadpool(lambda: services.repository.update(plate_id, **body.to_fields()))
        if record is None:
            raise HTTPException(status_code=404, detail="Plate not found")
        return record.to_dict()

    @app.post("/api/scan")
    async def scan(body: ScanRequest):
        if not body.image:
            return JSONResponse(status_code=400, content={"error": "Image data is required"})
        try:
            encoded = decode_image_payload(body.image)
        except DecodeError as ex:
            logger.info("Payload de imagen inválido: %s", ex)
            return RecognitionOutcome.not_detected().to_dict()

        outcome, record = await services.ingress.scan(encoded)
        response = outcome.to_dict()
        if record is not None:
            response["record"] = record.to_dict()
        return response

    @app.post("/api/validate")
    async def validate(body: ValidateRequest):
        record = await services.ingress.validate_manual(body.plate_number, body.detection_type)
        return record.to_dict()

    @app.get("/api/stats")
    async def stats():
        records = await run_in_threadpool(services.repository.get_all)
        return compute_daily_stats(records)

    # ============================================================
    # WebSocket
    # ============================================================

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        await websocket.accept()
        handle = await services.broadcaster.subscribe(WebSocketSubscriber(websocket))
        try:
            while True:
                data = await websocket.receive_text()
                await services.broadcaster.handle_message(handle, data)
        except WebSocketDisconnect:
            pass
        finally:
            await services.broadcaster.unsubscribe(handle)

    return app
