# qrapi/main.py

from __future__ import annotations

import json
import logging
import secrets
import time
from typing import Optional

import sentry_sdk
from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.exceptions import HTTPException as StarletteHTTPException

from qrapi.errors import QRAPIError, ValidationError
from qrapi.models import Base64DecodeRequest, BulkRequest
from qrapi.payloads import PAYLOAD_TYPES
from qrapi.qr_generator import generate, run_batch
from qrapi.qr_scanner import decode_base64_image, decode_image_bytes
from qrapi.settings import (
    ALLOWED_ORIGINS,
    API_VERSION,
    LOG_LEVEL,
    MAX_BODY_BYTES,
    MAX_BULK_ITEMS,
    MAX_IMAGE_BYTES,
    SENTRY_DSN,
    SENTRY_TRACES_SAMPLE_RATE,
)

# Init Sentry if configured
if SENTRY_DSN:
    sentry_sdk.init(dsn=SENTRY_DSN, traces_sample_rate=SENTRY_TRACES_SAMPLE_RATE)

logger = logging.getLogger("qrapi")
logging.basicConfig(level=LOG_LEVEL, format="%(message)s")

app = FastAPI(title="QR Code Generator & Decoder API", version=API_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _fail(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse({"success": False, "error": message, **extra}, status_code=status_code)


# ---------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------
@app.exception_handler(QRAPIError)
async def qrapi_exception_handler(request: Request, exc: QRAPIError):
    if exc.status_code >= 500:
        logger.error(
            json.dumps({"event": "error", "path": request.url.path, "error": exc.message})
        )
    return _fail(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return _fail(400, "Invalid request body. Send a JSON object; see GET / for the contract.")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return _fail(
            404,
            f"Route {request.method} {request.url.path} not found.",
            help="Visit GET / for full documentation",
        )
    return _fail(exc.status_code, str(exc.detail))


# Return JSON for unexpected errors to avoid empty/HTML responses
@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.error(json.dumps({"event": "error", "path": request.url.path, "error": str(exc)}))
    return _fail(500, str(exc) or "Something went wrong")


# ---------------------------------------------------------
# Request preprocessing
# ---------------------------------------------------------
def _body_too_large() -> str:
    return f"Request body too large. Maximum {MAX_BODY_BYTES // (1024 * 1024)}MB."


class BodySizeLimitMiddleware:
    """413 for bodies over MAX_BODY_BYTES, declared or streamed."""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = Headers(scope=scope).get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > MAX_BODY_BYTES:
            await _fail(413, _body_too_large())(scope, receive, send)
            return

        received = 0

        async def limited_receive():
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                # Raised while FastAPI reads the body; the HTTP handler shapes it.
                if received > MAX_BODY_BYTES:
                    raise HTTPException(status_code=413, detail=_body_too_large())
            return message

        await self.app(scope, limited_receive, send)


app.add_middleware(BodySizeLimitMiddleware)


# Request id + access log
@app.middleware("http")
async def request_log(request: Request, call_next):
    request_id = secrets.token_hex(8)
    request.state.request_id = request_id
    start_time = time.time()
    response = await call_next(request)
    duration = round((time.time() - start_time) * 1000, 2)
    logger.info(
        json.dumps(
            {
                "event": "request",
                "request_id": request_id,
                "path": request.url.path,
                "method": request.method,
                "status": response.status_code,
                "duration_ms": duration,
            }
        )
    )
    response.headers["X-Request-ID"] = request_id
    return response


# ---------------------------------------------------------
# Docs
# ---------------------------------------------------------
DOCS = {
    "name": "QR Code Generator & Decoder API",
    "version": API_VERSION,
    "description": "Generate QR codes for URLs, text, WiFi, vCard, email, SMS, UPI & more. "
    "Decode QR from images.",
    "endpoints": {
        "GET  /qr/url": "URL QR code | ?url=https://example.com",
        "GET  /qr/text": "Plain text QR | ?text=Hello+World",
        "GET  /qr/email": "Email QR | ?to=user@mail.com &subject=Hi &body=Message",
        "GET  /qr/sms": "SMS QR | ?phone=+919876543210 &message=Hello",
        "GET  /qr/phone": "Phone call QR | ?phone=+919876543210",
        "GET  /qr/wifi": "WiFi QR | ?ssid=MyNetwork &password=mypass &encryption=WPA &hidden=false",
        "GET  /qr/vcard": "Contact/vCard QR | ?name= &phone= &email= &org= &title= &url= "
        "&address= &note=",
        "GET  /qr/upi": "UPI Payment QR | ?vpa=user@upi &name=Name &amount=100 &currency=INR &note=",
        "GET  /qr/location": "GPS Location QR | ?lat=28.6139 &lng=77.2090 &label=",
        "GET  /qr/whatsapp": "WhatsApp message QR | ?phone=+91... &message=Hello",
        "GET  /qr/event": "Calendar event QR | ?title= &start= &end= &location= &description=",
        "POST /qr/bulk": f"Bulk generate up to {MAX_BULK_ITEMS} QRs | body: "
        "{ items: [{type, data}], size?, format?, error_correction? }",
        "POST /qr/decode": "Decode QR from image upload | multipart: file=image",
        "POST /qr/decode/base64": "Decode QR from base64 image | body: { image: base64string }",
        "GET  /health": "Liveness check",
    },
    "common_query_params": {
        "size": "QR size in pixels (100–2000, default 300)",
        "margin": "Quiet zone border (0–10, default 2)",
        "color": "QR dot color hex without # (default 000000)",
        "bg_color": "Background color hex without # (default ffffff)",
        "error_correction": "Error correction level: L, M, Q, H (default M)",
        "format": "Output format: png | svg | base64 (default png)",
    },
    "bulk_types": list(PAYLOAD_TYPES),
    "error_correction_guide": {
        "L": "~7% data recovery — smallest QR",
        "M": "~15% data recovery — balanced (default)",
        "Q": "~25% data recovery — better for logos",
        "H": "~30% data recovery — best for printed QRs",
    },
    "example_requests": {
        "url_qr": "/qr/url?url=https://google.com&size=400&color=1a1a2e",
        "wifi_qr": "/qr/wifi?ssid=HomeNetwork&password=mypass123&encryption=WPA",
        "vcard_qr": "/qr/vcard?name=Rahul+Sharma&phone=+919876543210"
        "&email=rahul@gmail.com&org=TechCorp",
        "upi_qr": "/qr/upi?vpa=rahul@okicici&name=Rahul+Sharma&amount=499",
        "whatsapp_qr": "/qr/whatsapp?phone=+919876543210&message=Hello+from+API",
        "bulk_qr": {
            "method": "POST",
            "url": "/qr/bulk",
            "body": {
                "items": [
                    {"type": "url", "data": {"url": "https://google.com"}},
                    {"type": "text", "data": {"text": "Hello World"}},
                ]
            },
        },
    },
}


@app.get("/")
def root():
    return DOCS


@app.get("/health")
def health():
    return {"success": True, "status": "ok", "version": API_VERSION}


# ---------------------------------------------------------
# Generate
# ---------------------------------------------------------
def _single_qr_route(kind: str):
    def handler(request: Request):
        params = dict(request.query_params)
        return generate(kind, params, params)

    handler.__name__ = f"qr_{kind}"
    return handler


for _kind in PAYLOAD_TYPES:
    app.add_api_route(f"/qr/{_kind}", _single_qr_route(_kind), methods=["GET"])


@app.post("/qr/bulk")
def qr_bulk(body: BulkRequest):
    report = run_batch(body.items, body.model_dump(exclude={"items"}))
    return report.to_dict()


# ---------------------------------------------------------
# Decode
# ---------------------------------------------------------
@app.post("/qr/decode")
def qr_decode(file: Optional[UploadFile] = File(None)):
    if file is None:
        raise ValidationError(
            "file", 'No image file provided. Send image as multipart form-data with key "file"'
        )
    if not (file.content_type or "").startswith("image/"):
        raise ValidationError("file", "Only image files are allowed (jpg, png, gif, webp)")

    img_bytes = file.file.read(MAX_IMAGE_BYTES + 1)
    if len(img_bytes) > MAX_IMAGE_BYTES:
        raise ValidationError(
            "file", f"File too large. Maximum {MAX_IMAGE_BYTES // (1024 * 1024)}MB allowed."
        )

    data = decode_image_bytes(img_bytes).to_dict()
    data["image_info"].update(
        {
            "file_size_kb": f"{len(img_bytes) / 1024:.1f}",
            "mime_type": file.content_type,
        }
    )
    return {"success": True, "method": "file_upload", "data": data}


@app.post("/qr/decode/base64")
def qr_decode_base64(body: Base64DecodeRequest):
    if not body.image:
        raise ValidationError(
            "image",
            'Provide image as base64 string in body: { "image": "data:image/png;base64,..." }',
        )
    result = decode_base64_image(body.image, max_bytes=MAX_IMAGE_BYTES)
    return {"success": True, "method": "base64", "data": result.to_dict()}
