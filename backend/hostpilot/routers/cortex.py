"""Captain Cortex routes."""

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from hostpilot.cortex.roles import DEFAULT_ROLE
from hostpilot.db.dependencies import get_db
from hostpilot.schemas.common import ApiResponse
from hostpilot.schemas.cortex import (
    AnswerResult,
    CortexAskRequest,
    RoleCapabilities,
    RoleGreeting,
    SuggestedQuestions,
)
from hostpilot.services.cortex import answer_question, get_capabilities, get_greeting, get_suggestions


router = APIRouter(prefix="/api/cortex")


def get_organization_id(x_organization_id: str = Header(...)) -> str:
    """Tenant id supplied by the upstream auth layer."""

    organization_id = x_organization_id.strip()
    if not organization_id:
        raise HTTPException(status_code=422, detail="X-Organization-Id header must not be blank.")
    return organization_id


def get_user_role(x_user_role: str = Header(DEFAULT_ROLE)) -> str:
    """Caller role; a missing or blank header gets the least privileged profile."""

    return x_user_role.strip().lower() or DEFAULT_ROLE


@router.post("/ask", response_model=AnswerResult)
def ask_cortex(
    payload: CortexAskRequest,
    organization_id: str = Depends(get_organization_id),
    role: str = Depends(get_user_role),
    db: Session = Depends(get_db),
) -> AnswerResult:
    """Answer a question from the caller's tenant data."""

    return answer_question(db, payload.question, organization_id, role=role)


@router.get("/capabilities", response_model=ApiResponse[RoleCapabilities])
def read_capabilities(role: str = Depends(get_user_role)) -> ApiResponse[RoleCapabilities]:
    return ApiResponse(data=get_capabilities(role))


@router.get("/greeting", response_model=ApiResponse[RoleGreeting])
def read_greeting(role: str = Depends(get_user_role)) -> ApiResponse[RoleGreeting]:
    return ApiResponse(data=get_greeting(role))


@router.get("/suggestions", response_model=ApiResponse[SuggestedQuestions])
def read_suggestions() -> ApiResponse[SuggestedQuestions]:
    return ApiResponse(data=get_suggestions())
