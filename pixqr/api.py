"""FastAPI application for pixqr."""
from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .brcode import Payer, Receiver, decode_payload, normalize_receiver
from .config import settings
from .errors import ServiceError
from .keys import PaymentKey
from .logging_conf import configure_logging
from .middleware import RequestLoggingMiddleware, route_path
from .monitoring import metrics_payload, record_service_error
from .schemas import (
    DecodeRequest,
    DecodeResponse,
    GeneratePixRequest,
    GeneratePixResponse,
    ImportedPayer,
    ImportPayersRequest,
    ImportPayersResponse,
    PayerPayload,
    ReceiverOut,
)
from .services.csv_io import parse_payers_csv, payers_to_csv
from .services.generator import BatchResult, PixBatchGenerator

app = FastAPI(title="pixqr", version="0.1.0")
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

logger = logging.getLogger("pixqr.api")


def _warn_insecure_defaults() -> None:
    if settings.api_key == "dev-secret-key":
        logger.warning(
            "api key is using the default value",
            extra={"config_key": "api_key"},
        )


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    _warn_insecure_defaults()


async def require_api_key(x_api_key: str = Header(...)) -> None:
    if x_api_key != settings.api_key:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    path = route_path(request)
    logger.warning(
        "service error",
        extra={"code": exc.code, "path": path, "method": request.method},
    )
    record_service_error(exc.code, path)
    return JSONResponse(status_code=exc.status_code, content={"code": exc.code, "message": exc.message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled exception",
        extra={"path": route_path(request), "method": request.method},
    )
    return JSONResponse(status_code=500, content={"code": "ERR_INTERNAL", "message": "Internal server error"})


def _generate(payload: GeneratePixRequest) -> BatchResult:
    generator = PixBatchGenerator()
    return generator.generate(
        key=PaymentKey(kind=payload.key.kind, value=payload.key.value),
        receiver=Receiver(name=payload.receiver.name, city=payload.receiver.city),
        payers=[Payer(reference=p.reference, amount=p.amount) for p in payload.payers],
        description=payload.description,
    )


@app.get("/health", tags=["system"])
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metrics", tags=["system"])
async def metrics() -> Response:
    payload, content_type = metrics_payload()
    return Response(content=payload, media_type=content_type)


@app.post("/v1/pix", response_model=GeneratePixResponse, tags=["pix"], dependencies=[Depends(require_api_key)])
async def generate_pix(payload: GeneratePixRequest) -> GeneratePixResponse:
    result = _generate(payload)
    receiver = normalize_receiver(result.receiver)
    return GeneratePixResponse(
        key_kind=result.key.kind,
        key=result.key.normalized(),
        receiver=ReceiverOut(name=receiver.name, city=receiver.city),
        payers=[
            PayerPayload(reference=r.reference, amount=r.amount, payload=r.payload, crc=r.crc)
            for r in result.results
        ],
    )


@app.post("/v1/pix/csv", tags=["pix"], dependencies=[Depends(require_api_key)])
async def export_pix_csv(payload: GeneratePixRequest) -> Response:
    result = _generate(payload)
    return Response(
        content=payers_to_csv(result.results),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{settings.csv_filename}.csv"'},
    )


@app.post("/v1/pix/decode", response_model=DecodeResponse, tags=["pix"], dependencies=[Depends(require_api_key)])
async def decode_pix(payload: DecodeRequest) -> DecodeResponse:
    decoded = decode_payload(payload.payload)
    return DecodeResponse(
        key=decoded.key,
        name=decoded.name,
        city=decoded.city,
        amount=decoded.amount,
        reference=decoded.reference,
        description=decoded.description,
        crc=decoded.crc,
        fields=decoded.fields,
    )


@app.post("/v1/payers/import", response_model=ImportPayersResponse, tags=["payers"], dependencies=[Depends(require_api_key)])
async def import_payers(payload: ImportPayersRequest) -> ImportPayersResponse:
    payers = parse_payers_csv(payload.csv)
    return ImportPayersResponse(payers=[ImportedPayer(reference=p.reference, amount=p.amount) for p in payers])
