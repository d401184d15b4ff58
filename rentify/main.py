import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from rentify.config import API_PREFIX, APP_HOST, APP_PORT, CORS_ORIGINS, DEBUG, LOG_LEVEL
from rentify.database.init import Base, engine
from rentify.responses.base import build_response
from rentify.responses.error import bad_request_error, internal_server_error
from rentify.routes import booking_routes, notification_routes

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(title="Rentify API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return bad_request_error("Validation failed", errors=exc.errors())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return build_response(exc.status_code, False, message=str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return internal_server_error("Something went wrong!", str(exc))


app.include_router(booking_routes.router, prefix=API_PREFIX)
app.include_router(notification_routes.router, prefix=API_PREFIX)


@app.get("/")
def read_root():
    return {"name": "Rentify API", "version": "1.0.0"}


@app.get(f"{API_PREFIX}/health")
def health():
    return {
        "status": "OK",
        "message": "Rentify API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


if __name__ == "__main__":
    uvicorn.run("rentify.main:app", host=APP_HOST, port=APP_PORT, reload=DEBUG)
