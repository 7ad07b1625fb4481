import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse, Response
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from portal.config import create_db
from portal.errors import PortalError
from portal.routes.auth_routes import auth_routes
from portal.routes.badge_routes import badge_routes
from portal.routes.course_routes import course_routes
from portal.routes.file_routes import file_routes
from portal.routes.history_routes import history_routes
from portal.routes.module_routes import module_routes
from portal.routes.user_routes import user_routes
from portal.utils.logger import clear_request_id, configure_logging, set_request_id

app = FastAPI(title="Training Portal")
logger = configure_logging()
create_db()
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_logger(request: Request, call_next):
    rid = set_request_id(request.headers.get("x-request-id"))
    try:
        logger.info("request start method=%s path=%s", request.method, request.url.path)
        response: Response = await call_next(request)
        logger.info("request end status=%s method=%s path=%s", response.status_code, request.method, request.url.path)
        response.headers["x-request-id"] = rid
        return response
    except Exception:
        logger.exception("request error method=%s path=%s", request.method, request.url.path)
        raise
    finally:
        clear_request_id()


def _error(status_code: int, detail) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail})


def _log_error(kind: str, request: Request, status_code: int, detail) -> None:
    log = logger.error if status_code >= 500 else logger.warning
    log("%s status=%s method=%s path=%s detail=%s", kind, status_code, request.method, request.url.path, detail)


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    # store failures carry a generic detail; the cause was logged where it was raised
    _log_error("domain error", request, exc.status_code, exc.detail)
    return _error(exc.status_code, exc.detail)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    _log_error("http error", request, exc.status_code, exc.detail)
    return _error(exc.status_code, exc.detail)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("validation error method=%s path=%s errors=\n%s", request.method, request.url.path, exc.errors())
    return _error(422, jsonable_encoder(exc.errors()))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Never leak internal exception details to clients.
    logger.exception("unhandled error method=%s path=%s", request.method, request.url.path)
    return _error(HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")


@app.get("/")
def read_root():
    return {"message": "Training Portal is Healthy"}


app.include_router(auth_routes, prefix="/auth", tags=["auth"])
app.include_router(course_routes, prefix="/courses", tags=["courses"])
app.include_router(history_routes, prefix="/history", tags=["history"])
app.include_router(badge_routes, prefix="/badges", tags=["badges"])
app.include_router(user_routes, prefix="/users", tags=["users"])
app.include_router(module_routes, prefix="/modules", tags=["modules"])
app.include_router(file_routes, prefix="/files", tags=["files"])

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
