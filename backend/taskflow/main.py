import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from taskflow.core.config import settings
from taskflow.core.database import close_db, init_db
from taskflow.core.errors import StoreError, TaskflowError
from taskflow.core.logging_setup import setup_logging
from taskflow.routers import auth, stats, tasks, users

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL)
    await init_db()
    yield
    await close_db()

app = FastAPI(title="Taskflow API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(tasks.router)
app.include_router(stats.router)

@app.exception_handler(TaskflowError)
async def taskflow_error_handler(request: Request, exc: TaskflowError):
    if isinstance(exc, StoreError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        detail = exc.public_message
    else:
        detail = exc.message
    return JSONResponse(status_code=exc.status_code, content={"detail": detail}, headers=exc.headers)

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    where = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=400,
        content={"detail": f"{where}: {message}" if where else message},
    )

@app.get("/")
async def root():
    return {"message": "Taskflow API is running"}

def run():
    import uvicorn

    uvicorn.run("taskflow.main:app", host=settings.API_HOST, port=settings.API_PORT)

if __name__ == "__main__":
    run()
