import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from portal.api.endpoints import auth
from portal.api.endpoints import projects
from portal.api.endpoints import work_items
from portal.api.endpoints import comments
from portal.api.endpoints import tasks
from portal.api.endpoints import sprints
from portal.api.endpoints import milestones
from portal.api.endpoints import epics
from portal.api.endpoints import change_requests


from fastapi.middleware.cors import CORSMiddleware
from portal.core.config import Settings
from portal.core.errors import InvalidTransitionError, NotFoundError, RateLimitedError, ValidationError

settings = Settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = FastAPI(title="Studio Portal Engine")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NotFoundError)
def handle_not_found(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(InvalidTransitionError)
def handle_invalid_transition(request: Request, exc: InvalidTransitionError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(ValidationError)
def handle_validation(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(RateLimitedError)
def handle_rate_limited(request: Request, exc: RateLimitedError):
    return JSONResponse(
        status_code=429,
        content={"detail": str(exc), "next_available_at": exc.next_available_at.isoformat()},
    )


project_prefix = "/projects/{project_id}"

app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(projects.router, prefix="/projects", tags=["projects"])
app.include_router(work_items.router, prefix=f"{project_prefix}/work-items", tags=["work_items"])
app.include_router(comments.router, prefix=f"{project_prefix}/work-items", tags=["comments"])
app.include_router(tasks.router, prefix=f"{project_prefix}/work-items", tags=["tasks"])
app.include_router(sprints.router, prefix=f"{project_prefix}/sprints", tags=["sprints"])
app.include_router(milestones.router, prefix=f"{project_prefix}/milestones", tags=["milestones"])
app.include_router(epics.router, prefix=f"{project_prefix}/epics", tags=["epics"])
app.include_router(change_requests.router, prefix=f"{project_prefix}/change-requests", tags=["change_requests"])
