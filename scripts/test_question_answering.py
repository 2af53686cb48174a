#!/usr/bin/env python3
"""
Question Answering Test Script

Tests:
1. Notice period, location and salary handlers
2. B.Tech/CSE degree detection
3. Job context analysis and profile alignment
4. /api/answer-question for choice and text formats (fake LLM)

Run: python scripts/test_question_answering.py
"""
import sys
sys.path.insert(0, '.')

from fastapi.testclient import TestClient

from apply_assist.main import app
from apply_assist.services.gemini_client import get_gemini_client, LLMServiceError
from apply_assist.services.job_context import analyze_job_context, default_job_context
from apply_assist.services.answer_handlers import (
    extract_days_from_notice_period,
    handle_notice_period_question,
    handle_location_question,
    handle_multiple_choice_salary_question,
    handle_salary_text_question,
    has_tech_cse_degree,
)
from apply_assist.services.question_classifier import detect_question_format
from apply_assist.schemas.schemas import QuestionFormat

from fakes import FakeLLMClient


CSE_PROFILE = {
    "name": "Asha Rao",
    "location": "Bangalore",
    "skills": ["Python", "React"],
    "summary": "Full-stack developer building web applications with Python and React for two years.",
    "noticePeriod": "30 days",
    "currentCtc": "8 LPA",
    "expectedCtc": "10",
    "education": [{"degree": "B.Tech", "field": "Computer Science", "institution": "VIT"}],
}

NOTICE_OPTIONS = ["15 days or less", "1 month", "2 months", "3 months"]


def make_client(fake_llm):
    app.dependency_overrides[get_gemini_client] = lambda: fake_llm
    return TestClient(app)


def test_notice_period_handler():
    print("\n[1] Testing notice period handler...")

    assert extract_days_from_notice_period("30 days") == 30
    assert extract_days_from_notice_period("2 months") == 60
    assert extract_days_from_notice_period("1 week") == 7
    assert extract_days_from_notice_period("Immediate joiner") == 0
    assert extract_days_from_notice_period("two months") == 60
    assert extract_days_from_notice_period(None) is None

    assert handle_notice_period_question(NOTICE_OPTIONS, {"noticePeriod": "30 days"}) == "1 month"
    assert handle_notice_period_question(
        ["Immediate", "15 days", "30 days"], {"noticePeriod": "Immediate"}
    ) == "Immediate"
    assert handle_notice_period_question(
        ["Less than 30 days", "More than 90 days"], {"noticePeriod": "120 days"}
    ) == "More than 90 days"
    assert handle_notice_period_question(NOTICE_OPTIONS, {}) is None

    print("    ✅ Notice period tests passed!")


def test_location_handler():
    print("\n[2] Testing location handler...")

    assert handle_location_question(["Bangalore", "Pune"], {"location": "Bangalore"}, "Preferred city?") == "Bangalore"

    answer = handle_location_question(
        ["Within Pune", "Outside Pune"], {"location": "Mumbai"}, "Are you based in Pune?"
    )
    assert answer == "Outside Pune"

    answer = handle_location_question(
        ["Yes, willing to relocate", "No"],
        {"location": "Delhi", "relocationFlexible": True},
        "Are you willing to relocate to Hyderabad?"
    )
    assert answer == "Yes, willing to relocate"

    assert handle_location_question(["Pune", "Chennai"], {}, "Which city are you located in?") is None

    print("    ✅ Location tests passed!")


def test_salary_handlers():
    print("\n[3] Testing salary handlers...")
    mid = default_job_context()
    fresher = dict(default_job_context(), isFresherRole=True)

    options = ["0-5 LPA", "5-10 LPA", "10-15 LPA", "15+ LPA"]
    assert handle_multiple_choice_salary_question(options, {"expectedCtc": "10"}, mid) == "10-15 LPA"

    options = ["Up to 3 LPA", "3-8 LPA", "Above 8 LPA"]
    assert handle_multiple_choice_salary_question(options, {}, fresher) == "3-8 LPA"

    options = ["10-15 LPA", "20-24 LPA"]
    assert handle_multiple_choice_salary_question(options, {"expectedCtc": "25-30"}, mid) == "20-24 LPA"

    options = ["As per company standards", "Negotiable"]
    assert handle_multiple_choice_salary_question(options, {}, mid) == "As per company standards"

    assert handle_salary_text_question("What is your expected CTC?", {"expectedCtc": "12 LPA"}, mid) == "12 LPA"
    assert handle_salary_text_question("What is your expected CTC?", {}, mid) == "12 LPA"
    assert handle_salary_text_question("What is your current CTC?", {"currentCtc": "8 LPA"}, mid) == "8 LPA"
    assert handle_salary_text_question("What is your current CTC?", {}, fresher) == (
        "Not applicable as a fresher, but my expectation is around 5 LPA."
    )
    assert handle_salary_text_question("What is your current CTC?", {}, mid) == "8 LPA"

    print("    ✅ Salary tests passed!")


def test_tech_degree_detection():
    print("\n[4] Testing B.Tech/CSE detection...")

    assert has_tech_cse_degree(CSE_PROFILE)
    assert not has_tech_cse_degree({"education": [{"degree": "B.Tech", "field": "Mechanical Engineering"}]})
    assert has_tech_cse_degree({"summary": "Completed B.Tech in Computer Science from VIT"})
    assert not has_tech_cse_degree({})

    print("    ✅ Degree detection tests passed!")


def test_job_context():
    print("\n[5] Testing job context analysis...")

    ctx = analyze_job_context(
        {"description": "Hiring freshers for an entry level role. Salary 4 LPA. Python and React."},
        CSE_PROFILE
    )
    assert ctx["isFresherRole"] is True
    assert ctx["experienceLevel"] == "entry-level"
    assert ctx["salaryRange"]["max"] == 4
    assert "python" in ctx["skills"] and "react" in ctx["skills"]

    ctx = analyze_job_context(
        {"description": "Senior backend engineer with 8+ years experience, 30-40 LPA"}, None
    )
    assert ctx["isSeniorRole"] is True
    assert ctx["experience"] == {"min": 8, "max": 13, "unit": "years"}
    assert ctx["salaryRange"] == {"min": 30, "max": 40, "unit": "LPA"}
    assert ctx["profileJobAlignment"] == "unknown"

    fresher_profile = dict(CSE_PROFILE, totalExperienceYears=0)
    ctx = analyze_job_context(
        {"description": "Fresher developer", "skills": ["Python", "React"]}, fresher_profile
    )
    assert ctx["profileJobAlignment"] == "high"

    ctx = analyze_job_context("not a dict", CSE_PROFILE)
    assert ctx["experienceLevel"] == "mid-level"

    print("    ✅ Job context tests passed!")


def test_question_format_detection():
    print("\n[6] Testing question format detection...")

    assert detect_question_format("Kindly answer: Are you okay with night shifts? Yes No") == QuestionFormat.naukri_radio_buttons
    assert detect_question_format("Are you comfortable with travel? Yes No") == QuestionFormat.radio_buttons
    assert detect_question_format("Why do you want to join us?") == QuestionFormat.text_input

    print("    ✅ Format detection tests passed!")


def test_api_tech_degree_fast_path():
    print("\n[7] Testing API: B.Tech/CSE fast path...")
    fake = FakeLLMClient()
    client = make_client(fake)

    response = client.post("/api/answer-question", json={
        "question": "Have you done B.E/B.Tech in CSE/IT?",
        "options": ["Yes", "No"],
        "questionFormat": "RADIO_BUTTONS",
        "profile": CSE_PROFILE
    })
    assert response.status_code == 200
    assert response.json() == {"answer": "Yes"}
    assert fake.prompts == []
    print("    ✅ Answered from profile without LLM")


def test_api_multiple_choice():
    print("\n[8] Testing API: multiple choice...")

    client = make_client(FakeLLMClient())
    response = client.post("/api/answer-question", json={
        "question": "What is your notice period?",
        "options": NOTICE_OPTIONS,
        "questionFormat": "MULTIPLE_CHOICE",
        "profile": CSE_PROFILE
    })
    assert response.json() == {"answer": "1 month"}

    response = client.post("/api/answer-question", json={
        "question": "Do you have a bachelor's degree?",
        "options": ["Yes", "No"],
        "questionFormat": "RADIO_BUTTONS",
        "profile": {"education": [{"degree": "Bachelor of Technology", "field": "Information Technology"}]}
    })
    assert response.json() == {"answer": "Yes"}

    fake = FakeLLMClient(replies=["night."])
    client = make_client(fake)
    response = client.post("/api/answer-question", json={
        "question": "Preferred work shift?",
        "options": ["Day", "Night", "Rotational"],
        "questionFormat": "MULTIPLE_CHOICE",
        "profile": CSE_PROFILE
    })
    assert response.json() == {"answer": "Night"}
    assert fake.calls[0]["temperature"] == 0.1
    assert "3. Rotational" in fake.prompts[0]

    client = make_client(FakeLLMClient(replies=["UNCERTAIN"]))
    response = client.post("/api/answer-question", json={
        "question": "Preferred work shift?",
        "options": ["Day", "Night"],
        "questionFormat": "MULTIPLE_CHOICE",
        "profile": CSE_PROFILE
    })
    assert response.status_code == 400
    assert "given options" in response.json()["detail"]

    print("    ✅ Multiple choice tests passed!")


def test_api_text_answers():
    print("\n[9] Testing API: text answers...")

    fake = FakeLLMClient()
    client = make_client(fake)
    response = client.post("/api/answer-question", json={
        "question": "What is your current CTC?",
        "profile": CSE_PROFILE
    })
    assert response.json() == {"answer": "8 LPA"}

    response = client.post("/api/answer-question", json={
        "question": "Are you comfortable working from our Pune office? Yes No",
        "profile": CSE_PROFILE
    })
    assert response.json() == {"answer": "Yes"}
    assert fake.prompts == []

    fake = FakeLLMClient(replies=["I enjoy building products that reach millions of users."])
    client = make_client(fake)
    response = client.post("/api/answer-question", json={
        "question": "Why do you want to join us?",
        "profile": CSE_PROFILE,
        "jobDetails": {"title": "Frontend Engineer", "company": "Acme"}
    })
    assert response.json() == {"answer": "I enjoy building products that reach millions of users."}
    assert "Frontend Engineer" in fake.prompts[0]

    client = make_client(FakeLLMClient(error=LLMServiceError("quota exceeded")))
    response = client.post("/api/answer-question", json={
        "question": "Why do you want to join us?",
        "profile": CSE_PROFILE
    })
    assert response.status_code == 400

    response = client.post("/api/answer-question", json={"question": "", "profile": CSE_PROFILE})
    assert response.status_code == 400

    for payload in ({"question": None, "profile": CSE_PROFILE}, {"profile": CSE_PROFILE}, {"question": "   "}):
        response = client.post("/api/answer-question", json=payload)
        assert response.status_code == 400
        assert response.json()["detail"] == "Question is required"

    print("    ✅ Text answer tests passed!")


def main():
    print("=" * 60)
    print("QUESTION ANSWERING TESTS")
    print("=" * 60)

    try:
        test_notice_period_handler()
        test_location_handler()
        test_salary_handlers()
        test_tech_degree_detection()
        test_job_context()
        test_question_format_detection()
        test_api_tech_degree_fast_path()
        test_api_multiple_choice()
        test_api_text_answers()

        print("\n" + "=" * 60)
        print("✅ ALL QUESTION ANSWERING TESTS PASSED!")
        print("=" * 60)
    finally:
        app.dependency_overrides.clear()


if __name__ == "__main__":
    main()
