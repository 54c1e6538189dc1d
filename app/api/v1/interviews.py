from fastapi import APIRouter, UploadFile, File, Depends
from pydantic import BaseModel, Field
from app.llm.interview_chain import interview_chain
from app.schemas.interview import (
    EvaluationRequest,
    InterviewEvaluation,
    InterviewSet,
    InterviewSetRequest,
    InterviewUsageStatus,
    ResumeAnalysis,
)
from app.services.usage_service import usage_service
from app.utils.parsers import resume_parser
from app.core.exceptions import EntitlementRequiredError, ResumeParsingError
from app.api.v1.auth import get_internal_user_id
from app.api.v1.subscriptions import require_pro_plan
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/interviews", tags=["Interviews"])


class ResumeTextRequest(BaseModel):
    resume_text: str = Field(..., min_length=1)


@router.get("/usage", response_model=InterviewUsageStatus)
async def get_usage(internal_id: str = Depends(get_internal_user_id)):
    """Free interview quota and whether the caller may start an interview."""
    return await usage_service.get_status(internal_id)


@router.post("/generate", response_model=InterviewSet)
async def generate_interview(
    request: InterviewSetRequest,
    internal_id: str = Depends(get_internal_user_id)
):
    """
    Generate a mock interview.

    Pro users can always start one; others get a single free interview.
    """
    status = await usage_service.get_status(internal_id)
    if not status.can_start_interview:
        raise EntitlementRequiredError("Free interview already used. Upgrade to Pro to continue.")

    result = await interview_chain.generate_interview_set(
        interview_type=request.interview_type,
        question_count=request.question_count,
        job_role=request.job_role
    )
    await usage_service.start_interview(internal_id)
    return result


@router.post("/evaluate", response_model=InterviewEvaluation)
async def evaluate_interview(
    request: EvaluationRequest,
    internal_id: str = Depends(get_internal_user_id)
):
    """Score the answers of a finished interview."""
    logger.info(f"Evaluating interview for user {internal_id}")
    return await interview_chain.evaluate_answers(
        questions=request.questions,
        answers=request.answers,
        ideal_answers=request.ideal_answers,
        resume_text=request.resume_text
    )


@router.post("/resume/analyze", response_model=ResumeAnalysis)
async def analyze_resume_text(
    request: ResumeTextRequest,
    internal_id: str = Depends(require_pro_plan)
):
    """Analyze pasted resume text. Pro only."""
    return await interview_chain.analyze_resume(request.resume_text)


@router.post("/resume", response_model=ResumeAnalysis)
async def upload_resume(
    file: UploadFile = File(...),
    internal_id: str = Depends(require_pro_plan)
):
    """
    Upload a resume (PDF, TXT or MD) and get an analysis with tailored questions.
    Pro only.
    """
    content_type = file.content_type or "application/octet-stream"
    if not resume_parser.is_supported(content_type):
        raise ResumeParsingError(f"Unsupported file type: {content_type}")

    content = await file.read()
    if len(content) == 0:
        raise ResumeParsingError("Empty file")

    try:
        resume_text = resume_parser.parse(content, content_type)
    except ValueError as e:
        raise ResumeParsingError(str(e))

    logger.info(f"Parsed resume {file.filename} ({len(resume_text)} chars) for user {internal_id}")
    return await interview_chain.analyze_resume(resume_text)
