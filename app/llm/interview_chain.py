from typing import List, Dict, Any, Optional
from app.core.config import settings
from app.core.exceptions import InterviewGenerationError, ResumeParsingError
from app.llm import prompts
from app.schemas.interview import InterviewEvaluation
import json
import logging
import re

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*\n?|\n?```\s*$")

FALLBACK_HR_QUESTIONS = [
    "Tell me about a time when you had to work with a difficult team member. How did you handle it?",
    "Describe a challenging problem you solved. What was your approach?",
    "How do you prioritize tasks when you have multiple deadlines?",
    "What programming languages or tools are you most comfortable with and why?",
    "Explain the difference between a database and a spreadsheet to a non-technical person.",
]

FALLBACK_HR_ANSWERS = [
    "A good answer uses the STAR method (Situation, Task, Action, Result) and shows conflict resolution skills and professionalism.",
    "A strong response outlines a clear problem-solving process, demonstrates analytical thinking, and shows persistence in finding solutions.",
    "An effective answer shows time management skills, the ability to assess urgency vs importance, and communication with stakeholders about priorities.",
    "A comprehensive response mentions specific technologies, explains comfort level, and connects tools to practical applications or projects.",
    "A clear answer uses simple analogies, avoids jargon, and demonstrates the ability to communicate technical concepts to non-technical audiences.",
]

FALLBACK_RESUME_ANALYSIS = {
    "analysis": {
        "skills": ["Problem Solving", "Communication", "Technical Skills"],
        "suggested_role": "Professional",
        "strengths": ["Professional experience", "Diverse background"],
        "areas_to_improve": ["Quantifiable achievements", "Technical depth"],
        "suggestions": "Focus on highlighting specific achievements with measurable impact.",
        "job_openings": [{
            "role": "Software Developer",
            "locations": ["Bangalore", "Hyderabad", "Delhi", "Mumbai", "Pune", "Remote"],
            "global": ["USA", "Germany", "Singapore"]
        }]
    },
    "questions": [
        "Tell me about your professional background and key achievements.",
        "What are your core technical skills and how have you applied them?",
        "Describe the most challenging project you worked on and how you overcame obstacles.",
        "How do you handle working under pressure and tight deadlines?",
        "Where do you see yourself in 5 years and how does this role fit your goals?",
        "What specific experience makes you a good fit for this type of role?",
        "Describe a time when you had to learn a new technology or skill quickly.",
        "How do you approach problem-solving when facing complex technical issues?",
        "Tell me about a time you worked effectively in a team environment.",
        "What motivates you most in your professional work and career development?"
    ],
    "ideal_answers": [
        "A comprehensive answer highlighting relevant experience and quantifiable achievements.",
        "A detailed response with specific technical expertise examples and practical applications.",
        "A structured STAR method answer with measurable results and lessons learned.",
        "A thoughtful response showing stress management skills and prioritization strategies.",
        "An ambitious yet realistic career growth plan aligned with industry trends.",
        "A targeted response connecting past experience to future role requirements.",
        "A story demonstrating adaptability, learning agility, and proactive skill development.",
        "A systematic approach showing analytical thinking and methodical troubleshooting.",
        "An example demonstrating collaboration, communication, and collective success.",
        "A genuine response showing passion, purpose, and alignment with career trajectory."
    ]
}

SKIPPED_ANSWERS = {"", "No answer provided", "Question skipped"}


def clean_json_content(content: str) -> str:
    """Strip markdown code fences the model sometimes wraps JSON in."""
    return _FENCE_RE.sub("", content.strip()).strip()


def parse_json_content(content: str) -> Dict[str, Any]:
    result = json.loads(clean_json_content(content))
    if not isinstance(result, dict):
        raise ValueError("Expected a JSON object")
    return result


def _is_question_set(result: Dict[str, Any]) -> bool:
    return isinstance(result.get("questions"), list) and isinstance(result.get("ideal_answers"), list)


def fallback_role_questions(job_role: str, question_count: int) -> Dict[str, List[str]]:
    questions = [
        f"What specific experience do you have that makes you suitable for a {job_role} position?",
        f"Describe the most challenging aspect of working as a {job_role} and how you would handle it.",
        f"What tools, technologies, or methodologies are essential for success in {job_role}?",
        "How do you stay updated with the latest trends and developments in your field?",
        f"Walk me through your approach to a typical project or task in {job_role}.",
    ]
    answers = [
        f"A strong answer highlights relevant experience, specific achievements, and transferable skills that directly apply to {job_role} responsibilities.",
        "An effective response identifies realistic challenges, shows problem-solving approach, and demonstrates resilience and adaptability.",
        "A comprehensive answer lists current industry-standard tools, explains their importance, and shows awareness of evolving technologies.",
        "A good response shows commitment to continuous learning through multiple channels like courses, publications, networking, and hands-on practice.",
        f"A detailed answer outlines a systematic approach, shows planning skills, and demonstrates understanding of {job_role} workflows and best practices.",
    ]
    return {"questions": questions[:question_count], "ideal_answers": answers[:question_count]}


def fallback_hr_questions(question_count: int) -> Dict[str, List[str]]:
    return {
        "questions": FALLBACK_HR_QUESTIONS[:question_count],
        "ideal_answers": FALLBACK_HR_ANSWERS[:question_count]
    }


def grade_for_score(average: float) -> str:
    if average >= 8:
        return "A"
    if average >= 7:
        return "B+"
    if average >= 6:
        return "B"
    if average >= 5:
        return "C+"
    if average >= 4:
        return "C"
    return "D"


def fallback_evaluation(
    questions: List[str],
    answers: List[str],
    ideal_answers: List[str]
) -> Dict[str, Any]:
    """Heuristic scores from answer presence and length, used when the model output is unusable."""
    evaluations = []
    for i, _ in enumerate(questions):
        answer = answers[i] if i < len(answers) and answers[i] else "No answer provided"
        has_answer = answer.strip() not in SKIPPED_ANSWERS

        if not has_answer:
            base_score = 1.5
        elif len(answer) < 50:
            base_score = 4.0
        else:
            base_score = 6.5

        evaluations.append({
            "question_number": i + 1,
            "user_answer": answer,
            "ideal_answer": ideal_answers[i] if i < len(ideal_answers) else "Professional response expected with specific examples",
            "score": base_score,
            "remarks": (
                "Answer provided but could benefit from more specific examples and structured approach (STAR method)"
                if has_answer else
                "No answer provided. This question required a detailed response with examples."
            ),
            "score_breakdown": {
                "correctness": base_score if has_answer else 1,
                "completeness": max(1, base_score - 1) if has_answer else 1,
                "depth": max(1, base_score - 0.5) if has_answer else 1,
                "clarity": base_score if has_answer else 2
            },
            "improvement_tips": [
                "Use the STAR method (Situation, Task, Action, Result)",
                "Include specific metrics and quantifiable outcomes",
                "Provide more context about your role and responsibilities"
            ] if has_answer else [
                "Always attempt to answer every question",
                "If unsure, provide your best thoughtful response",
                "Use relevant examples from your experience"
            ]
        })

    average = sum(e["score"] for e in evaluations) / len(evaluations) if evaluations else 0.0
    return {
        "evaluations": evaluations,
        "overall_statistics": {
            "average_score": round(average, 1),
            "total_questions": len(questions),
            "strengths": [
                "Participated in the complete interview process",
                "Demonstrated engagement with the questions"
            ],
            "critical_weaknesses": [
                "Need more detailed and specific responses",
                "Could improve answer structure and depth"
            ],
            "overall_grade": grade_for_score(average),
            "harsh_but_helpful_feedback": (
                "Your responses need more depth and specific examples. "
                "Focus on quantifiable achievements and structured storytelling."
            ),
            "recommendation": (
                "Practice the STAR method and prepare specific examples with "
                "measurable outcomes before your next interview."
            )
        }
    }


class InterviewChain:
    """LLM chain for mock-interview questions, resume analysis and answer scoring."""

    def __init__(self, llm=None, evaluation_llm=None):
        self.llm = llm
        self.evaluation_llm = evaluation_llm or llm
        self.prompt = None

    def _ensure_initialized(self):
        """Lazy initialization of the chat models."""
        if self.prompt is None:
            # Import here to avoid heavy startup cost
            from langchain_core.prompts import ChatPromptTemplate

            self.prompt = ChatPromptTemplate.from_messages([
                ("system", "{system_prompt}"),
                ("human", "{request}"),
            ])

        if self.llm is None:
            if not settings.OPENROUTER_API_KEY:
                logger.error("OPENROUTER_API_KEY is not configured")
                raise InterviewGenerationError("LLM API key not configured")

            logger.info("Initializing InterviewChain models...")
            from langchain_openai import ChatOpenAI

            self.llm = ChatOpenAI(
                model=settings.LLM_MODEL,
                temperature=settings.LLM_TEMPERATURE,
                api_key=settings.OPENROUTER_API_KEY,
                base_url=settings.OPENROUTER_BASE_URL
            )
            self.evaluation_llm = ChatOpenAI(
                model=settings.LLM_MODEL,
                temperature=settings.LLM_EVALUATION_TEMPERATURE,
                api_key=settings.OPENROUTER_API_KEY,
                base_url=settings.OPENROUTER_BASE_URL
            )
            logger.info("InterviewChain initialized.")

    async def _complete(self, request: str, evaluation: bool = False) -> str:
        self._ensure_initialized()
        llm = self.evaluation_llm if evaluation else self.llm
        chain = self.prompt | llm

        try:
            response = await chain.ainvoke({
                "system_prompt": prompts.SYSTEM_PROMPT,
                "request": request
            })
        except Exception as e:
            logger.error(f"LLM request failed: {e}")
            raise InterviewGenerationError(str(e))

        content = response.content if hasattr(response, "content") else str(response)
        if not content:
            raise InterviewGenerationError("No content generated")
        return content

    async def generate_interview_set(
        self,
        interview_type: str,
        question_count: int,
        job_role: Optional[str] = None
    ) -> Dict[str, List[str]]:
        """Questions with ideal answers, either role-specific or mixed HR/technical."""
        if interview_type == "hr-technical" or not job_role:
            return await self.generate_hr_technical(question_count)

        logger.info(f"Generating {question_count} {interview_type} questions for role: {job_role}")
        content = await self._complete(prompts.interview_set_prompt(job_role, question_count))
        try:
            result = parse_json_content(content)
            if _is_question_set(result):
                return {"questions": result["questions"], "ideal_answers": result["ideal_answers"]}
            raise ValueError("Invalid JSON structure for role-based questions")
        except ValueError as e:
            logger.warning(f"Falling back to canned role questions: {e}")
            return fallback_role_questions(job_role, question_count)

    async def generate_hr_technical(self, question_count: int) -> Dict[str, List[str]]:
        logger.info(f"Generating {question_count} HR/technical questions")
        content = await self._complete(prompts.hr_technical_prompt(question_count))
        try:
            result = parse_json_content(content)
            if _is_question_set(result):
                return {"questions": result["questions"], "ideal_answers": result["ideal_answers"]}
            raise ValueError("Invalid JSON structure for HR technical questions")
        except ValueError as e:
            logger.warning(f"Falling back to canned HR questions: {e}")
            return fallback_hr_questions(question_count)

    async def analyze_resume(self, resume_text: str) -> Dict[str, Any]:
        if not resume_text or not resume_text.strip():
            raise ResumeParsingError("No resume text provided for analysis")

        logger.info(f"Analyzing resume ({len(resume_text)} chars)")
        content = await self._complete(prompts.resume_analysis_prompt(resume_text))
        try:
            result = parse_json_content(content)
            if result.get("analysis") and _is_question_set(result):
                return result
            raise ValueError("Invalid JSON structure")
        except ValueError as e:
            logger.warning(f"Falling back to canned resume analysis: {e}")
            return json.loads(json.dumps(FALLBACK_RESUME_ANALYSIS))

    async def evaluate_answers(
        self,
        questions: List[str],
        answers: List[str],
        ideal_answers: List[str],
        resume_text: Optional[str] = None
    ) -> Dict[str, Any]:
        """Score each answer; any model failure yields the heuristic evaluation."""
        logger.info(f"Evaluating {len(questions)} answers (resume context: {bool(resume_text)})")
        try:
            content = await self._complete(
                prompts.evaluation_prompt(questions, answers, ideal_answers, resume_text),
                evaluation=True
            )
            evaluation = parse_json_content(content)
            if not isinstance(evaluation.get("evaluations"), list):
                raise ValueError("Invalid evaluation structure: missing evaluations array")
            if not evaluation.get("overall_statistics"):
                raise ValueError("Invalid evaluation structure: missing overall_statistics")
            return InterviewEvaluation.model_validate(evaluation).model_dump()
        except (ValueError, InterviewGenerationError) as e:
            logger.warning(f"Returning fallback evaluation: {e}")
            return fallback_evaluation(questions, answers, ideal_answers)


# Singleton instance
interview_chain = InterviewChain()
