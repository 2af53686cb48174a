"""
Interaction Log Service - flat JSON audit logs of chatbot interactions.

Every /llm-chatbot-action request writes one file:
    <interaction_log_dir>/llm-interaction-<timestamp>-<id>.json

Entry shape:
{
    "timestamp": ISO-8601,
    "question": str,
    "options": [str],
    "questionCategories": {category: bool},
    "prompt": str | None,
    "rawResponse": str | None,
    "response": {"type": "heuristic" | "llm" | "fallback", "answer": ..., "actionType": str},
    "error": str | None,
    "durationMs": int
}

The viewer endpoints list, read, delete and aggregate these files.
"""

import json
import re
import uuid
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, List, Dict, Any

from apply_assist.core.config import get_settings
from apply_assist.core.logging_config import get_logger
from apply_assist.schemas.schemas import ResponseSource

logger = get_logger(__name__)


LOG_PREFIX = "llm-interaction-"
LOG_NAME_RE = re.compile(r"^llm-interaction-[\w\-.]+\.json$")
MAX_BATCH_SIZE = 20
TOP_QUESTIONS = 10


class InvalidLogNameError(ValueError):
    """Filename does not match the interaction log pattern."""


class LogNotFoundError(LookupError):
    """No log file with this name."""


class InteractionLogService:
    """
    Reads and writes interaction logs in one directory.
    """

    def __init__(self, log_dir: Optional[str] = None):
        self.log_dir = Path(log_dir or get_settings().interaction_log_dir)

    # ========================================================
    # WRITE
    # ========================================================

    def write_log(self, entry: Dict[str, Any]) -> str:
        """
        Persist one entry. Returns the filename.
        Write failures are logged, never raised to the request.
        """
        now = datetime.now(timezone.utc)
        entry.setdefault("timestamp", now.isoformat())
        filename = f"{LOG_PREFIX}{now.strftime('%Y%m%dT%H%M%S%f')}-{uuid.uuid4().hex[:8]}.json"
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            (self.log_dir / filename).write_text(
                json.dumps(entry, indent=2, default=str), encoding="utf-8"
            )
        except OSError as e:
            logger.error("Failed to write interaction log %s: %s", filename, e)
        return filename

    # ========================================================
    # READ
    # ========================================================

    def _log_files(self) -> List[Path]:
        if not self.log_dir.is_dir():
            return []
        return [
            p for p in self.log_dir.iterdir()
            if p.is_file() and p.name.startswith(LOG_PREFIX) and p.name.endswith(".json")
        ]

    def _path_for(self, filename: str) -> Path:
        if not LOG_NAME_RE.match(filename or ""):
            raise InvalidLogNameError("Invalid filename format")
        path = self.log_dir / filename
        if not path.is_file():
            raise LogNotFoundError("Log file not found")
        return path

    def list_logs(self) -> List[dict]:
        """All logs, newest first (by modification time)."""
        infos = []
        for path in self._log_files():
            stat = path.stat()
            infos.append({
                "filename": path.name,
                "created": datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                "size": stat.st_size
            })
        infos.sort(key=lambda i: i["created"], reverse=True)
        return infos

    def read_log(self, filename: str) -> dict:
        """
        Raises:
            InvalidLogNameError: bad filename
            LogNotFoundError: no such file
        """
        path = self._path_for(filename)
        return json.loads(path.read_text(encoding="utf-8"))

    def read_logs(self, filenames: List[str]) -> Dict[str, dict]:
        """Read up to MAX_BATCH_SIZE logs; invalid or missing names are skipped."""
        logs = {}
        for filename in filenames[:MAX_BATCH_SIZE]:
            try:
                logs[filename] = self.read_log(filename)
            except (InvalidLogNameError, LogNotFoundError):
                continue
            except ValueError as e:
                logger.error("Error reading log file %s: %s", filename, e)
        return logs

    def delete_log(self, filename: str) -> None:
        self._path_for(filename).unlink()
        logger.info("Deleted interaction log %s", filename)

    # ========================================================
    # STATS
    # ========================================================

    def compute_stats(self) -> dict:
        """
        Aggregate over all logs:
        - questionCategories: how often each category was true
        - responseTypes: counts per response source
        - mostCommonQuestions: top 10 lower-cased questions
        - accuracy: share of non-fallback responses, in percent
        """
        files = self._log_files()
        categories: Counter = Counter()
        response_types: Counter = Counter()
        questions: Counter = Counter()

        for path in files:
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.error("Error processing log file %s: %s", path.name, e)
                continue

            if data.get("question"):
                questions[str(data["question"]).lower()] += 1
            for category, value in (data.get("questionCategories") or {}).items():
                if value is True:
                    categories[category] += 1
            response_type = (data.get("response") or {}).get("type")
            if response_type:
                response_types[response_type] += 1

        total_responses = sum(response_types.values())
        fallback = response_types.get(ResponseSource.fallback.value, 0)
        accuracy = (
            round((total_responses - fallback) / total_responses * 100, 2)
            if total_responses else 0
        )

        return {
            "totalLogs": len(files),
            "questionCategories": dict(categories),
            "responseTypes": dict(response_types),
            "accuracy": accuracy,
            "mostCommonQuestions": [
                {"question": q, "count": c} for q, c in questions.most_common(TOP_QUESTIONS)
            ]
        }


def get_interaction_log_service() -> InteractionLogService:
    """FastAPI dependency (overridden in tests)."""
    return InteractionLogService()
