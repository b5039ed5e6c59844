import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.api_routers.v1 import api_router
from app.features.health.routes.health import router as health_router
from app.platform.config import settings
from app.platform.exceptions import add_exception_handlers

# Configure logging to show INFO level messages
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

app = FastAPI(
    title=settings.APP_NAME,
    description="Single-page SEO analysis: fetch, score and recommend",
    version="1.0.0",
    debug=settings.DEBUG,
)


# Root endpoint for basic info
@app.get("/", tags=["Info"])
def root():
    return {
        "app_name": settings.APP_NAME,
        "description": "Scores a web page's on-page SEO signals and suggests fixes.",
        "version": "1.0.0",
        "docs_url": "/docs",
        "api_base": settings.API_V1_PREFIX,
    }


@app.middleware("http")
async def assign_request_id(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

add_exception_handlers(app)

app.include_router(health_router)
app.include_router(api_router, prefix=settings.API_V1_PREFIX)
