import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from app.config import Config
from app.errors import GenerationError, GenerationInProgress, InvalidFieldError, SubmissionBlocked
from app.routes import rpm

logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(title="RPM Generator Backend")

origins = [
    Config.FRONTEND_URL,
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


def _with_cors(request: Request, response: JSONResponse) -> JSONResponse:
    # Error responses built here skip the CORS middleware, so re-add the headers
    origin = request.headers.get("origin")
    if origin in origins:
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
    return response


@app.exception_handler(GenerationError)
async def generation_error_handler(request: Request, exc: GenerationError):
    logging.warning(f"Generation failed: {exc}")
    return _with_cors(request, JSONResponse(status_code=502, content={"detail": exc.user_message}))


@app.exception_handler(SubmissionBlocked)
async def submission_blocked_handler(request: Request, exc: SubmissionBlocked):
    return _with_cors(request, JSONResponse(
        status_code=400,
        content={"detail": exc.user_message, "missing": exc.missing},
    ))


@app.exception_handler(GenerationInProgress)
async def generation_in_progress_handler(request: Request, exc: GenerationInProgress):
    return _with_cors(request, JSONResponse(status_code=409, content={"detail": exc.user_message}))


@app.exception_handler(InvalidFieldError)
async def invalid_field_handler(request: Request, exc: InvalidFieldError):
    return _with_cors(request, JSONResponse(status_code=422, content={"detail": str(exc)}))


# Global Exception Handler to ensure CORS headers are present even on 500 errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logging.error(f"Global Exception: {exc}", exc_info=True)
    return _with_cors(request, JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error", "message": str(exc)},
    ))


# 1. Proxy & Session Middleware
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

app.add_middleware(
    SessionMiddleware,
    secret_key=Config.SECRET_KEY,
    max_age=Config.SESSION_MAX_AGE,
    https_only=Config.ENV == "PRODUCTION",
    same_site="lax",
)

# 2. CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,  # Session cookie
    allow_methods=["*"],
    allow_headers=["*"],
)

# 3. Routes
app.include_router(rpm.router, prefix="/api/rpm", tags=["RPM"])


@app.get("/")
def root():
    return {"message": "RPM Generator Backend Online"}
