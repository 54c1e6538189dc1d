from typing import List, Optional

SYSTEM_PROMPT = (
    "You are an experienced technical recruiter and interview coach. "
    "Always answer with a single JSON object and nothing else."
)


def interview_set_prompt(job_role: str, question_count: int) -> str:
    return f"""Generate {question_count} specialized interview questions for a {job_role} position.

Return JSON in this EXACT format:
{{
  "questions": [
    "Question 1 specific to {job_role}",
    "Question 2 technical for {job_role}",
    "Question 3 behavioral for {job_role}"
  ],
  "ideal_answers": [
    "Comprehensive ideal answer for question 1",
    "Detailed ideal answer for question 2",
    "Professional ideal answer for question 3"
  ]
}}

Requirements:
- Questions must be specific to {job_role} responsibilities
- Include technical skills relevant to {job_role}
- Add behavioral questions suited for {job_role} environment
- Mix of experience-based and scenario-based questions
- Ideal answers should demonstrate expert-level knowledge
- Total questions: {question_count}
- Focus on real-world applications and problem-solving"""


def hr_technical_prompt(question_count: int) -> str:
    return f"""Generate {question_count} professional interview questions that combine HR behavioral questions and basic technical concepts.

Return JSON in this EXACT format:
{{
  "questions": ["Question 1 text", "Question 2 text", "Question 3 text"],
  "ideal_answers": ["Ideal answer for question 1", "Ideal answer for question 2", "Ideal answer for question 3"]
}}

Requirements:
- Mix of HR behavioral questions (teamwork, problem-solving, communication)
- Basic technical concepts questions (not too advanced)
- Questions should be suitable for any professional level
- Total questions: {question_count}
- Each ideal answer should be 2-3 sentences showing what a good response includes"""


def resume_analysis_prompt(resume_text: str) -> str:
    return f"""Analyze the following resume and provide a comprehensive assessment.

RESUME CONTENT:
{resume_text}

Return JSON in this exact format:
{{
  "analysis": {{
    "skills": ["Array of technical and professional skills found"],
    "suggested_role": "Most suitable job role based on experience",
    "strengths": ["Key strengths from resume"],
    "areas_to_improve": ["Specific areas to enhance"],
    "suggestions": "Detailed actionable advice",
    "job_openings": [
      {{
        "role": "Matching role 1",
        "locations": ["Bangalore", "Hyderabad", "Delhi", "Mumbai", "Pune", "Remote"],
        "global": ["USA", "Germany", "Singapore"]
      }}
    ]
  }},
  "questions": ["Ten questions specific to the resume content"],
  "ideal_answers": ["Ten ideal answers, one per question, based on the candidate's background"]
}}"""


def evaluation_prompt(
    questions: List[str],
    answers: List[str],
    ideal_answers: List[str],
    resume_text: Optional[str] = None
) -> str:
    resume_block = f"RESUME CONTEXT:\n{resume_text[:1000]}...\n\n" if resume_text else ""
    qa_block = "\n".join(
        f"Question {i + 1}: {question}\n"
        f"Ideal Answer: {ideal_answers[i] if i < len(ideal_answers) else 'Professional response expected'}\n"
        f"User Answer: {answers[i] if i < len(answers) and answers[i] else 'No answer provided'}\n---"
        for i, question in enumerate(questions)
    )
    return f"""You are an expert interview evaluator. Evaluate each user answer against the ideal answer using 4 metrics (0-10):

1. CORRECTNESS - How accurate compared to ideal answer
2. COMPLETENESS - Coverage of ideal answer points
3. DEPTH - Detail level and insight compared to ideal
4. CLARITY - Structure and communication quality

{resume_block}Questions and Answers to Evaluate:
{qa_block}

Return JSON in this EXACT format:
{{
  "evaluations": [
    {{
      "question_number": 1,
      "user_answer": "actual user answer",
      "ideal_answer": "ideal answer text",
      "score": 7.5,
      "remarks": "Detailed feedback on the answer",
      "score_breakdown": {{"correctness": 8, "completeness": 7, "depth": 7, "clarity": 8}},
      "improvement_tips": ["Specific tip 1", "Specific tip 2"]
    }}
  ],
  "overall_statistics": {{
    "average_score": 7.2,
    "total_questions": {len(questions)},
    "strengths": ["Key strength 1", "Key strength 2"],
    "critical_weaknesses": ["Weakness 1", "Weakness 2"],
    "overall_grade": "B+",
    "harsh_but_helpful_feedback": "Direct feedback",
    "recommendation": "Actionable recommendation"
  }}
}}

Important:
- Provide realistic scores (not all 5/10)
- Give specific, actionable feedback
- If answer is "No answer provided" or "Question skipped", give low scores (1-3)
- Use STAR method recommendations when appropriate"""
