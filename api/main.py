import logging
import time
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from admin import router as admin_router
from clients import router as clients_router
from core import db, responses, schema, settings
from tutors import router as tutors_router

load_dotenv()

logging.basicConfig(
    level=settings.log_level(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Storage is opened and the schema applied before any request is accepted.
    database = await db.open_database()
    try:
        await schema.ensure_schema(database)
    except Exception:
        if database is not None:
            await database.close()
        raise

    app.state.database = database
    logger.info("startup_complete storage=%s", settings.storage_mode())
    try:
        yield
    finally:
        app.state.database = None
        if database is not None:
            await database.close()
        logger.info("shutdown_complete")


app = FastAPI(title="Tutor Match API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-User-Email"],
)

responses.install_exception_handlers(app)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "request method=%s path=%s status=%s duration_ms=%.2f",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


app.include_router(tutors_router.router, tags=["tutors"])
app.include_router(tutors_router.admin_router, tags=["admin"])
app.include_router(clients_router.router, tags=["clients"])
app.include_router(clients_router.admin_router, tags=["admin"])
app.include_router(admin_router.router, tags=["admin"])


@app.get("/health")
async def health(request: Request) -> dict:
    database = db.get_database(request)
    if database is None:
        database_status = "disabled"
    else:
        database_status = "ok" if await database.ping() else "unreachable"
    return {
        "status": "ok",
        "message": "Server is running",
        "storage": settings.STORAGE_MODE_SAMPLE if database is None else settings.STORAGE_MODE_DATABASE,
        "database": database_status,
    }


@app.get("/")
def root() -> dict:
    return {"message": "tutor-match api"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.host(), port=settings.port(), log_level="info")
