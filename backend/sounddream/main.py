import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .core.config import get_settings
from .routers import recommend, health
from .core.db import engine, Base
from .models import music  # noqa: F401  registers tables on Base.metadata

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, debug=settings.debug)


@app.middleware('http')
async def log_requests(request, call_next):
    response = await call_next(request)
    logger.debug('%s %s -> %s', request.method, request.url.path, response.status_code)
    return response

# CORS: in dev accept any localhost/127.0.0.1 origin (any port). Tighten for prod.
if settings.debug:
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=r"http://(localhost|127\.0\.0\.1)(:\d+)?",
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

@app.on_event("startup")
def on_startup():
    # Auto-create tables in dev; schema ownership lives with the main application
    Base.metadata.create_all(bind=engine)

app.include_router(health.router)
app.include_router(recommend.router)

@app.get("/")
async def root():
    return {"app": settings.app_name, "status": "running"}
