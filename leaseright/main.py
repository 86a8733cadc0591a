from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from leaseright.core.config import settings
from leaseright.core.errors import GatewayError, gateway_error_handler, request_validation_handler
from leaseright.core.logger import get_logger
from leaseright.core.middleware import log_requests
from leaseright.routes.admin_router import admin_router
from leaseright.routes.auth_router import auth_router, user_router
from leaseright.routes.lease_request_router import lease_router
from leaseright.routes.quotation_router import quotation_router
from leaseright.routes.vehicle_router import vehicle_router

logger = get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    mode = "backend API" if settings.USE_BACKEND_API else "local store"
    logger.info(f" Application startup complete ({mode}, backend={settings.BACKEND_BASE_URL})")

    yield

    logger.info(" Application shutdown initiated")

app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(log_requests)
app.add_exception_handler(GatewayError, gateway_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.include_router(auth_router)
app.include_router(user_router)
app.include_router(lease_router)
app.include_router(quotation_router)
app.include_router(vehicle_router)
app.include_router(admin_router)


@app.get("/health")
async def health():
    return {"status": "ok", "useBackendApi": settings.USE_BACKEND_API}
