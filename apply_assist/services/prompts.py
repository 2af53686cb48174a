"""
Prompt templates for the Gemini calls.

Kept short and structured:
- Profile / job / page fields are truncated to a character budget
- Answers are requested as JSON (actions, resumes) or exact option text
"""

import json
from typing import Optional, List, Dict, Any

from apply_assist.services.job_context import benchmark_for
from apply_assist.services.profile_service import build_profile_context


TRUNCATED_MARKER = "... [truncated]"
CONTEXT_CHARS = 1000
RESUME_TEXT_CHARS = 15000
DESCRIPTION_CHARS = 300


def truncate(value, limit: int) -> str:
    """Cut a string (or JSON-able value) to `limit` chars with a marker."""
    if value is None:
        return "N/A"
    text = value if isinstance(value, str) else json.dumps(value, default=str)
    if len(text) > limit:
        return text[:limit] + TRUNCATED_MARKER
    return text


def _format_experience(experience: List[dict]) -> str:
    if not experience:
        return "- Experience: Not specified"
    lines = [
        f"  * {e.get('title') or 'N/A'} at {e.get('company') or 'N/A'} "
        f"({e.get('startDate') or 'N/A'} - {e.get('endDate') or 'Present'})"
        for e in experience
    ]
    return "- Experience:\n" + "\n".join(lines)


def _format_education(education: List[dict]) -> str:
    if not education:
        return "- Education: Not specified"
    lines = [
        f"  * {e.get('degree') or 'N/A'} in {e.get('field') or 'N/A'} "
        f"from {e.get('institution') or 'N/A'} ({e.get('year') or e.get('endDate') or 'N/A'})"
        for e in education
    ]
    return "- Education:\n" + "\n".join(lines)


def _candidate_block(profile: Optional[dict], job_details: Optional[dict], job_context: Dict[str, Any]) -> str:
    context = build_profile_context(profile, job_details)
    candidate = context["candidateProfile"]
    job = context["jobContext"]
    description = job["description"]
    if description:
        description = description[:DESCRIPTION_CHARS] + "..."
    skills = job_context.get("skills") or job["skills"]

    return f"""Candidate Profile:
- Name: {candidate['name']}
- Location: {candidate['location'] or 'Not specified'}
- Skills: {', '.join(candidate['skills']) or 'Not specified'}
- Summary: {candidate['summary'] or 'Not specified'}
{_format_experience(candidate['experience'])}
{_format_education(candidate['education'])}
- Total Experience: {candidate['totalExperienceYears']} years
- Current CTC: {candidate['currentCtc'] or 'Not specified'}
- Expected CTC: {candidate['expectedCtc'] or 'Not specified'}
- Notice Period: {candidate['noticePeriod'] or 'Not specified'}

Job Context:
- Position: {job['title'] or 'Not specified'}
- Company: {job['company'] or 'Not specified'}
- Description: {description or 'Not specified'}
- Required Skills: {', '.join(skills) or 'Not specified'}
- Experience Level: {job_context.get('experienceLevel') or 'Not specified'}
- Is Fresher Role: {job_context.get('isFresherRole')}
- Is Senior Role: {job_context.get('isSeniorRole')}
- Profile/Job Alignment: {job_context.get('profileJobAlignment')}"""


def build_multiple_choice_prompt(
    question: str,
    options: List[str],
    profile: Optional[dict],
    job_details: Optional[dict],
    job_context: Dict[str, Any]
) -> str:
    """Ask for the exact text of one option, or UNCERTAIN."""
    numbered = "\n".join(f"{i + 1}. {opt}" for i, opt in enumerate(options))
    return f"""You are an AI assistant helping a job seeker choose the best option for a job application question.
Select the most appropriate and truthful answer based on the candidate's profile and the job context.

{_candidate_block(profile, job_details, job_context)}

Question: "{question}"

Available Options:
{numbered}

Instructions:
1. Choose the SINGLE BEST and MOST TRUTHFUL option from the available choices.
2. For willingness questions (relocation, shifts) where the profile is silent, assume willingness.
3. For salary/CTC, pick the option matching the candidate's current/expected CTC and the role's benchmarks.
4. If no option can be chosen confidently, reply with the exact string "UNCERTAIN".
5. Return ONLY the exact text of the selected option, with no commentary.

Your Answer (exact text of the selected option or "UNCERTAIN"):"""


def build_text_answer_prompt(
    question: str,
    profile: Optional[dict],
    job_details: Optional[dict],
    job_context: Dict[str, Any]
) -> str:
    """Ask for a short first-person answer to a free-text question."""
    benchmark = benchmark_for(job_context)
    return f"""You are helping a job seeker fill in an application form.
Answer the question below as the candidate, in the first person.

{_candidate_block(profile, job_details, job_context)}

Salary benchmark for this level: {benchmark['minCTC']} - {benchmark['maxCTC']} (typical {benchmark['typical']})

Question: "{question}"

Rules:
- Be truthful to the profile. Do not invent employers, degrees or certifications.
- Numeric questions (years, CTC, notice period) get just the value, e.g. "3" or "12 LPA".
- Otherwise answer in 1-3 concise, professional sentences.
- Return only the answer text."""


def build_chatbot_action_prompt(
    question: str,
    options: Optional[List[str]],
    profile: Optional[dict],
    job_details: Optional[dict] = None,
    page_html: Optional[str] = None,
    resume_profile: Optional[dict] = None
) -> str:
    """
    Ask for a single UI action as JSON: {"actionType": ..., "actionValue": ...}.
    """
    return f"""You are an automation agent for job application chatbots. Given the context below, return a JSON object with the best action to take on the UI.
Supported actionType values: select, type, textarea, multiSelect, dropdown, upload, click.

Answer like a real human candidate, not a bot. Personalize answers using the profile, resume and job context.
For open-ended questions use experience, education or skills from the profile to write a short, conversational answer.

IMPORTANT RULES:
- NEVER use actionType "none". If you are unsure, use "type" instead with an appropriate text response.
- For disability percentage questions, respond with "0%".
- For other disability questions, answer that the candidate has no disability.
- For Yes/No or multiple-choice questions, use actionType "select" and the exact option text as actionValue.
- For multi-select questions, use actionType "multiSelect" and a list of option texts.

Examples:
1. {{"question": "Have you done B.E/B.Tech?", "options": ["Yes", "No"]}} => {{"actionType": "select", "actionValue": "Yes"}}
2. {{"question": "Full name"}} => {{"actionType": "type", "actionValue": "<profile name>"}}
3. {{"question": "Why do you want this job?"}} => {{"actionType": "textarea", "actionValue": "I'm excited about this opportunity because ..."}}
4. {{"question": "Select your highest qualification", "options": ["B.Tech", "M.Tech", "Other"]}} => {{"actionType": "dropdown", "actionValue": "B.Tech"}}
5. {{"question": "Which technologies do you know?", "options": ["React", "Angular", "Vue"]}} => {{"actionType": "multiSelect", "actionValue": ["React", "Vue"]}}
6. {{"question": "What is your disability percentage?"}} => {{"actionType": "type", "actionValue": "0%"}}

Context:
Question: {question}
Options: {json.dumps(options or [])}
Profile: {truncate(profile, CONTEXT_CHARS)}
JobDetails: {truncate(job_details, CONTEXT_CHARS)}
PageHtml: {truncate(page_html, CONTEXT_CHARS)}
ResumeData: {truncate(resume_profile, CONTEXT_CHARS)}

Return only a JSON object as described above."""


def build_resume_parsing_prompt(resume_text: str) -> str:
    """Structured extraction prompt; resume text capped at RESUME_TEXT_CHARS."""
    limited = (resume_text or "")[:RESUME_TEXT_CHARS]
    return f"""You are a professional resume parser. Extract structured information from the resume below as JSON:
- name: Full name of the person
- email: Email address
- phone: Phone number
- summary: Professional summary or objective
- skills: Array of skills (technical and non-technical)
- experience: Array of work experiences with company, title, startDate, endDate and description
- education: Array of education entries with institution, degree, field, startDate and endDate
- totalYearsOfExperience: Numerical value (can be approximate)
- currentCompany: Current company name if working
- noticePeriod: Notice period if mentioned
- currentCtc: Current CTC/salary if mentioned
- expectedCtc: Expected CTC/salary if mentioned
- immediateJoiner: Boolean indicating if the person can join immediately

Resume Text:
{limited}

Return ONLY a valid JSON object with the structure described above. Don't include any other text.
Only include fields that you can confidently extract from the resume."""
