"""FastAPI application entrypoint and HTTP controllers.

This module defines the HTTP endpoints of the project backend.
Controllers are intentionally thin: they accept requests, delegate to
`ProjectService`, and return JSON responses. Business errors raised by
the service are rendered by a single exception handler.

Endpoints implemented:
- POST /projects
- GET /projects
- POST /projects/{project_id}/histories
- GET /projects/{project_id}/histories
- GET /projects/histories/{project_history_id}
- GET /health
"""

from fastapi import FastAPI, Depends, Request
from fastapi.responses import JSONResponse, Response
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session
from typing import List
import json
import logging
import time
import uuid
from .database import create_db_and_tables, get_session
from .auth import get_current_member_id
from .errors import BusinessError
from .services import ProjectService
from .schemas import (
    ErrorResponse,
    ProjectCreateRequest,
    ProjectHistoryDetailResponse,
    ProjectHistoryResponse,
    ProjectHistorySummaryResponse,
    ProjectResponse,
    ProjectSaveRequest,
    ProjectSummaryResponse,
)
from .config import settings

app = FastAPI(title="CubeAI Project API")
logger = logging.getLogger("cubeai.api")
if not logger.handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

# Wide-open CORS keeps local frontends working without extra config in dev.
if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

create_db_and_tables()

_NOT_FOUND_RESPONSES = {404: {"model": ErrorResponse}}
# routes that need a signed-in member without using its id
_AUTHENTICATED = [Depends(get_current_member_id)]


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        logger.exception(
            "request_failed %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "duration_ms": elapsed_ms,
                },
                ensure_ascii=True,
            ),
        )
        raise
    response.headers["X-Request-ID"] = req_id
    elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
    logger.info(
        "request_done %s",
        json.dumps(
            {
                "request_id": req_id,
                "path": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
                "duration_ms": elapsed_ms,
            },
            ensure_ascii=True,
        ),
    )
    return response


@app.exception_handler(BusinessError)
async def business_error_handler(request: Request, exc: BusinessError):
    """Render a `BusinessError` using the status bound to its error code."""
    logger.warning(
        "business_error code=%s path=%s request_id=%s",
        exc.error_code.code,
        request.url.path,
        getattr(request.state, "request_id", ""),
    )
    return JSONResponse(status_code=exc.error_code.status, content=exc.to_payload())


def get_project_service(db: Session = Depends(get_session)) -> ProjectService:
    """Provide a `ProjectService` bound to the request's session."""
    return ProjectService.for_session(db)


@app.post("/projects", response_model=ProjectResponse, status_code=201, responses=_NOT_FOUND_RESPONSES)
def create_project(
    payload: ProjectCreateRequest,
    member_id: int = Depends(get_current_member_id),
    svc: ProjectService = Depends(get_project_service),
):
    """Create a project for the signed-in member."""
    return svc.create_project(member_id, payload)


@app.get("/projects", response_model=List[ProjectSummaryResponse], responses=_NOT_FOUND_RESPONSES)
def list_projects(
    member_id: int = Depends(get_current_member_id),
    svc: ProjectService = Depends(get_project_service),
):
    """List the signed-in member's projects."""
    return svc.get_projects(member_id)


@app.get(
    "/projects/histories/{project_history_id}",
    response_model=ProjectHistoryDetailResponse,
    responses=_NOT_FOUND_RESPONSES,
    dependencies=_AUTHENTICATED,
)
def get_project_history_detail(project_history_id: int, svc: ProjectService = Depends(get_project_service)):
    """Return one saved snapshot including its structure."""
    return svc.get_project_history_detail(project_history_id)


@app.post(
    "/projects/{project_id}/histories",
    response_model=ProjectHistoryResponse,
    status_code=201,
    responses=_NOT_FOUND_RESPONSES,
    dependencies=_AUTHENTICATED,
)
def save_project(project_id: int, payload: ProjectSaveRequest, svc: ProjectService = Depends(get_project_service)):
    """Save the current structure of a project as a new snapshot."""
    return svc.save_project(project_id, payload)


@app.get(
    "/projects/{project_id}/histories",
    response_model=List[ProjectHistorySummaryResponse],
    responses=_NOT_FOUND_RESPONSES,
    dependencies=_AUTHENTICATED,
)
def get_project_history(project_id: int, svc: ProjectService = Depends(get_project_service)):
    """List a project's snapshots, newest first."""
    return svc.get_project_history(project_id)


@app.get("/health")
def health():
    """Lightweight health check for uptime monitoring."""
    return {"status": "ok"}
