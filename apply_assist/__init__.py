"""
Apply Assist Backend
Answers job-application form questions for a browser extension.

Architecture:
- Heuristic handlers first (cheap string matching)
- Gemini LLM for everything else, with JSON extraction and repair
- MongoDB: scraped jobs for matching
- JSON files: LLM interaction audit logs
"""

__version__ = "1.0.0"
