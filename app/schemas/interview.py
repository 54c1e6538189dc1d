from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime


class InterviewSetRequest(BaseModel):
    """Request model for generating interview questions."""
    interview_type: str = Field(default="role-based", description="role-based or hr-technical")
    job_role: Optional[str] = Field(default=None, description="Target role for role-based sets")
    question_count: int = Field(default=5, ge=1, le=20)


class InterviewSet(BaseModel):
    questions: List[str]
    ideal_answers: List[str]


class EvaluationRequest(BaseModel):
    """Request model for scoring a finished interview."""
    questions: List[str] = Field(..., min_length=1)
    answers: List[str] = []
    ideal_answers: List[str] = []
    resume_text: Optional[str] = None


class ScoreBreakdown(BaseModel):
    correctness: float
    completeness: float
    depth: float
    clarity: float


class AnswerEvaluation(BaseModel):
    question_number: int
    user_answer: str
    ideal_answer: str
    score: float
    remarks: str
    score_breakdown: ScoreBreakdown
    improvement_tips: List[str] = []


class OverallStatistics(BaseModel):
    average_score: float
    total_questions: int
    strengths: List[str] = []
    critical_weaknesses: List[str] = []
    overall_grade: str
    harsh_but_helpful_feedback: str
    recommendation: str


class InterviewEvaluation(BaseModel):
    evaluations: List[AnswerEvaluation]
    overall_statistics: OverallStatistics


class ResumeAnalysis(BaseModel):
    analysis: Dict[str, Any]
    questions: List[str]
    ideal_answers: List[str]


class InterviewUsage(BaseModel):
    """Free interview quota for a user."""
    user_id: str
    free_interview_used: bool = False
    usage_count: int = 0
    last_interview_date: Optional[datetime] = None


class InterviewUsageStatus(BaseModel):
    usage: InterviewUsage
    has_pro_plan: bool
    can_start_interview: bool
