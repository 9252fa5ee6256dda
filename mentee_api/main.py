"""
FastAPI backend for the mentee learning portal.

Layered like the rest of the service:
- Service layer for business logic
- Repository pattern over a document store
- Structured logging
- Comprehensive error handling
- Dependency injection of the storage client and caller identity
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Query, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import Field

from quizcheck.answer import ValidationResult

from .core import (
    MenteeError,
    settings,
    setup_logging,
    get_logger,
    register_error_handlers,
)
from .core.security import get_current_identity
from .models import (
    AnalyticsOverview,
    DashboardStats,
    Identity,
    MenteeDetail,
    Question,
    QuestionProgress,
    QuestionStatus,
    QuestionType,
    SubjectId,
    Submission,
    UserProfile,
    UserRole,
)
from .models.domain import DocumentModel
from .repositories import (
    AdminRepository,
    DocumentStore,
    QuestionRepository,
    SubmissionRepository,
    UserRepository,
    get_document_store,
)
from .services import AnalyticsService, DashboardService, GradingService, QuestionService

# Setup logging
setup_logging()
logger = get_logger(__name__)


# Lifecycle management
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    logger.info(
        "Starting Mentee Portal API",
        extra_data={
            "environment": settings.ENVIRONMENT,
            "debug": settings.DEBUG,
            "storage": settings.STORAGE_BACKEND
        }
    )

    admins = AdminRepository(app.dependency_overrides.get(get_store, get_store)())
    for uid in settings.ADMIN_UIDS:
        await admins.add(uid, added_by="settings")

    yield
    logger.info("Shutting down Mentee Portal API")


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="REST API for the mentee portal question catalogue, answer grading and progress",
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan
)

# Register error handlers
register_error_handlers(app)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)


# Dependency injection
def get_store() -> DocumentStore:
    """Storage client handle (overridden in tests)"""
    return get_document_store()


def get_question_service_dep(store: DocumentStore = Depends(get_store)) -> QuestionService:
    return QuestionService(QuestionRepository(store), AdminRepository(store))


def get_grading_service_dep(store: DocumentStore = Depends(get_store)) -> GradingService:
    return GradingService(QuestionRepository(store), SubmissionRepository(store))


def get_dashboard_service_dep(store: DocumentStore = Depends(get_store)) -> DashboardService:
    return DashboardService(QuestionRepository(store), SubmissionRepository(store))


def get_analytics_service_dep(store: DocumentStore = Depends(get_store)) -> AnalyticsService:
    return AnalyticsService(
        QuestionRepository(store),
        SubmissionRepository(store),
        UserRepository(store),
        AdminRepository(store),
    )


# API Request/Response Models
class QuestionCreateRequest(DocumentModel):
    """Request to create a question"""
    subject_id: SubjectId
    type: QuestionType
    content: Dict[str, Any]
    deadline: datetime
    is_active: bool = True
    order: int = 0


class QuestionUpdateRequest(DocumentModel):
    """Partial question update; omitted or null fields are left unchanged"""
    subject_id: Optional[SubjectId] = None
    type: Optional[QuestionType] = None
    content: Optional[Dict[str, Any]] = None
    deadline: Optional[datetime] = None
    is_active: Optional[bool] = None
    order: Optional[int] = None


class QuestionActionRequest(DocumentModel):
    action: str


class QuestionListResponse(DocumentModel):
    questions: List[Question]


class SubmitAnswerRequest(DocumentModel):
    """Answer to a maths question"""
    answer: Any = Field(None, description="Option index, list of indices, or text")
    time_spent: int = Field(0, ge=0, description="Seconds spent on the question")


class SubmitAnswerResponse(DocumentModel):
    """Validation result and the attempt it was recorded as (null when not graded)"""
    result: ValidationResult
    submission: Optional[Submission] = None


class MeResponse(DocumentModel):
    profile: UserProfile
    is_admin: bool


# API Routes

@app.get("/")
async def read_root():
    """API root endpoint"""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "endpoints": {
            "questions": "/questions",
            "question": "/questions/{question_id}",
            "submissions": "/questions/{question_id}/submissions",
            "subject": "/subjects/{subject_id}/questions",
            "dashboard": "/dashboard",
            "analytics": "/admin/analytics",
            "mentee_analytics": "/admin/analytics/users/{user_id}",
            "health": "/health"
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT
    }


@app.get("/me", response_model=MeResponse)
async def me(
    identity: Identity = Depends(get_current_identity),
    store: DocumentStore = Depends(get_store)
):
    """Record a login and return the caller's profile"""
    is_admin = await AdminRepository(store).is_admin(identity.uid)
    role = UserRole.ADMIN if is_admin else UserRole.MENTEE
    profile = await UserRepository(store).upsert_login(identity, role)

    logger.info("User signed in", extra_data={"uid": identity.uid, "role": role.value})

    return MeResponse(profile=profile, is_admin=is_admin)


@app.get("/questions", response_model=QuestionListResponse)
async def list_questions(
    subject_id: Optional[SubjectId] = Query(None, alias="subjectId"),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    service: QuestionService = Depends(get_question_service_dep)
):
    """List questions, newest first, optionally filtered"""
    questions = await service.list_questions(subject_id, is_active)
    return QuestionListResponse(questions=questions)


@app.post("/questions", response_model=Question, status_code=status.HTTP_201_CREATED)
async def create_question(
    request: QuestionCreateRequest,
    identity: Identity = Depends(get_current_identity),
    service: QuestionService = Depends(get_question_service_dep)
):
    """Create a question (admin only)"""
    return await service.create_question(
        identity,
        subject_id=request.subject_id,
        question_type=request.type,
        content=request.content,
        deadline=request.deadline,
        is_active=request.is_active,
        order=request.order,
    )


@app.get("/questions/{question_id}", response_model=Question)
async def get_question(
    question_id: str,
    service: QuestionService = Depends(get_question_service_dep)
):
    """Get a question by ID"""
    return await service.get_question(question_id)


@app.put("/questions/{question_id}", response_model=Question)
async def update_question(
    question_id: str,
    request: QuestionUpdateRequest,
    identity: Identity = Depends(get_current_identity),
    service: QuestionService = Depends(get_question_service_dep)
):
    """Update the provided fields of a question (admin only)"""
    changes = {
        name: value
        for name, value in request.model_dump(exclude_unset=True).items()
        if value is not None
    }
    return await service.update_question(identity, question_id, changes)


@app.delete("/questions/{question_id}", response_model=Question)
async def delete_question(
    question_id: str,
    identity: Identity = Depends(get_current_identity),
    service: QuestionService = Depends(get_question_service_dep)
):
    """Deactivate a question (admin only); submissions are kept"""
    return await service.delete_question(identity, question_id)


@app.patch("/questions/{question_id}")
async def question_action(
    question_id: str,
    request: QuestionActionRequest,
    identity: Identity = Depends(get_current_identity),
    service: QuestionService = Depends(get_question_service_dep)
):
    """Run an action on a question; only ``hard-delete`` is supported"""
    if request.action != "hard-delete":
        raise MenteeError(
            "Invalid action",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"action": request.action}
        )

    await service.hard_delete_question(identity, question_id)
    return {"success": True, "message": "Question permanently deleted"}


@app.post("/questions/{question_id}/submissions", response_model=SubmitAnswerResponse)
async def submit_answer(
    question_id: str,
    request: SubmitAnswerRequest,
    identity: Identity = Depends(get_current_identity),
    service: GradingService = Depends(get_grading_service_dep)
):
    """
    Grade an answer to a maths question.

    A blank or unparseable answer returns an incorrect result with a prompt
    and is not recorded as an attempt.
    """
    outcome = await service.submit_answer(
        identity, question_id, request.answer, request.time_spent
    )
    return SubmitAnswerResponse(result=outcome.result, submission=outcome.submission)


@app.get("/questions/{question_id}/submissions", response_model=List[Submission])
async def submission_history(
    question_id: str,
    identity: Identity = Depends(get_current_identity),
    service: GradingService = Depends(get_grading_service_dep)
):
    """The caller's attempts at a question, most recent first"""
    return await service.history(identity, question_id)


@app.get("/subjects/{subject_id}/questions", response_model=List[QuestionProgress])
async def subject_questions(
    subject_id: SubjectId,
    status_filter: Optional[QuestionStatus] = Query(None, alias="status"),
    identity: Identity = Depends(get_current_identity),
    service: DashboardService = Depends(get_dashboard_service_dep)
):
    """Active questions of a subject with the caller's progress on each"""
    return await service.list_subject_questions(identity, subject_id, status_filter)


@app.get("/dashboard", response_model=DashboardStats)
async def dashboard(
    identity: Identity = Depends(get_current_identity),
    service: DashboardService = Depends(get_dashboard_service_dep)
):
    """The caller's progress across subjects"""
    return await service.get_stats(identity)


@app.get("/admin/analytics", response_model=AnalyticsOverview)
async def analytics(
    top: int = Query(10, ge=1, le=100),
    identity: Identity = Depends(get_current_identity),
    service: AnalyticsService = Depends(get_analytics_service_dep)
):
    """Portal-wide activity (admin only)"""
    return await service.overview(identity, top)


@app.get("/admin/analytics/users/{user_id}", response_model=MenteeDetail)
async def mentee_analytics(
    user_id: str,
    identity: Identity = Depends(get_current_identity),
    service: AnalyticsService = Depends(get_analytics_service_dep)
):
    """One user's record on every question (admin only)"""
    return await service.mentee_detail(identity, user_id)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "mentee_api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
