"""
In-memory stand-ins used by the test scripts.

- FakeLLMClient: canned replies (or an error) instead of Gemini
- FakeJobsCollection: minimal pymongo-like collection for the jobs query
"""
import re
import tempfile

from bson import ObjectId


class FakeLLMClient:
    """Returns queued replies in order; raises `error` when set."""

    def __init__(self, replies=None, error=None):
        self.replies = list(replies or [])
        self.error = error
        self.prompts = []
        self.calls = []

    def generate(self, prompt, **kwargs):
        self.prompts.append(prompt)
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.replies.pop(0) if self.replies else ""


class _FakeCursor:
    def __init__(self, docs):
        self.docs = docs

    def limit(self, n):
        return _FakeCursor(self.docs[:n])

    def __iter__(self):
        return iter(self.docs)


def _matches(doc, query):
    for key, cond in query.items():
        if key == "$and":
            if not all(_matches(doc, sub) for sub in cond):
                return False
        elif key == "$or":
            if not any(_matches(doc, sub) for sub in cond):
                return False
        elif isinstance(cond, dict) and "$regex" in cond:
            flags = re.IGNORECASE if "i" in cond.get("$options", "") else 0
            if not re.search(cond["$regex"], str(doc.get(key, "")), flags):
                return False
        elif doc.get(key) != cond:
            return False
    return True


class FakeJobsCollection:
    """Supports find(query).limit(n) with equality, $and, $or and $regex."""

    def __init__(self, docs):
        self.docs = [dict(d, _id=d.get("_id", ObjectId())) for d in docs]
        self.queries = []

    def find(self, query):
        self.queries.append(query)
        return _FakeCursor([d for d in self.docs if _matches(d, query)])


def temp_log_dir() -> str:
    return tempfile.mkdtemp(prefix="apply-assist-logs-")
