"""Analysis Service HTTP Handler - Wellness dashboard API.

Records are owned by the calling application and posted in the request
body; this service only aggregates them. Each report applies its own
lookback window unless the request overrides `days`.

Endpoints:
- GET /health - Health check
- GET /ready - Readiness check
- POST /overview - 30-day wellness overview
- POST /stress-report - 14-day stress report
- POST /mood-stats - 30-day mood statistics
- POST /weekly-summary - 7-day narrative summary (LLM, with fallback)
- POST /mood-insights - Coping suggestions for a single mood check-in
"""
import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from flask import Flask, jsonify, request

from mindwatch.services.crisis_service import CrisisClassifier
from mindwatch.services.llm_service import WellnessAssistant, create_assistant
from mindwatch.services.llm_service import defaults
from mindwatch.shared.models import MoodLog
from .analytics import (
    build_mood_stats,
    build_overview,
    build_stress_report,
    weekly_mood_data,
    within_days,
)

logger = logging.getLogger(__name__)

app = Flask(__name__)

NOTES_UNAVAILABLE = "AI analysis is temporarily unavailable. Your mood has been recorded."


class InvalidRecordError(ValueError):
    """Raised when a posted record cannot be parsed."""


@dataclass
class AnalysisConfig:
    """Lookback windows for each report, in days."""
    overview_days: int = 30
    stress_report_days: int = 14
    mood_stats_days: int = 30
    weekly_summary_days: int = 7
    max_lookback_days: int = 90


def parse_mood_logs(raw: Any) -> List[MoodLog]:
    """Parse the `moodLogs` array of a request body.

    Raises:
        InvalidRecordError: If the field is not a list or any entry is invalid
    """
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise InvalidRecordError("moodLogs must be a list")

    logs = []
    for index, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise InvalidRecordError(f"moodLogs[{index}] must be an object")
        try:
            logs.append(MoodLog.from_dict(entry))
        except (ValueError, TypeError) as e:
            raise InvalidRecordError(f"moodLogs[{index}]: {e}") from e
    return logs


class AnalysisHandler:
    """Handler for wellness analytics endpoints."""

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        assistant: Optional[WellnessAssistant] = None,
        classifier: Optional[CrisisClassifier] = None,
    ):
        """Initialize handler with dependencies.

        Args:
            config: Lookback configuration
            assistant: LLM-backed assistant; None means fixed fallbacks only
            classifier: Crisis classifier run on mood notes before the LLM
        """
        self.config = config or AnalysisConfig()
        self.assistant = assistant
        self.classifier = classifier or CrisisClassifier()

        logger.info(
            "ANALYSIS_HANDLER_INITIALIZED",
            extra={
                "llm_configured": assistant is not None,
                "max_lookback_days": self.config.max_lookback_days,
            }
        )

    def _window(self, requested: Optional[int], default: int) -> int:
        if requested is None:
            return default
        try:
            days = int(requested)
        except (TypeError, ValueError) as e:
            raise InvalidRecordError("days must be an integer") from e
        return max(1, min(days, self.config.max_lookback_days))

    def overview(
        self,
        mood_logs: Sequence[MoodLog],
        breathing_durations: Sequence[float] = (),
        journal_count: int = 0,
        chat_count: int = 0,
        days: Optional[int] = None,
    ) -> Dict[str, Any]:
        period = self._window(days, self.config.overview_days)
        result = build_overview(
            within_days(mood_logs, period),
            breathing_durations,
            journal_count,
            chat_count,
        )
        result["period"] = f"{period} days"
        return result

    def stress_report(self, mood_logs: Sequence[MoodLog], days: Optional[int] = None) -> Dict[str, Any]:
        period = self._window(days, self.config.stress_report_days)
        return build_stress_report(within_days(mood_logs, period))

    def mood_stats(self, mood_logs: Sequence[MoodLog], days: Optional[int] = None) -> Dict[str, Any]:
        period = self._window(days, self.config.mood_stats_days)
        return build_mood_stats(within_days(mood_logs, period))

    async def weekly_summary(
        self,
        mood_logs: Sequence[MoodLog],
        themes: Sequence[str] = (),
    ) -> Dict[str, Any]:
        """Narrative summary of the last week.

        Returns:
            {"summary": str, "period": "7 days", "logsReviewed": int}
        """
        period = self.config.weekly_summary_days
        recent = within_days(mood_logs, period)

        if self.assistant is None:
            summary = defaults.WEEKLY_SUMMARY_FALLBACK
        else:
            summary = await self.assistant.weekly_summary(weekly_mood_data(recent), list(themes))

        return {"summary": summary, "period": f"{period} days", "logsReviewed": len(recent)}

    async def mood_insights(self, mood_log: MoodLog) -> Dict[str, Any]:
        """Suggestions and note analysis for a new check-in.

        Notes are screened for crisis language first; when a crisis is
        detected the LLM is skipped and resources are returned instead.
        """
        assessment = self.classifier.detect_crisis(mood_log.notes)
        if assessment.is_crisis:
            logger.warning("MOOD_NOTES_CRISIS", extra={"severity": assessment.severity.value})
            return {
                "suggestions": defaults.default_stress_suggestions(),
                "aiAnalysis": "",
                "crisis": assessment.to_dict(),
            }

        context = {
            "score": mood_log.score,
            "emotion": mood_log.emotion.value,
            "triggers": [t.value for t in mood_log.triggers],
            "notes": mood_log.notes,
        }

        if self.assistant is None:
            suggestions = defaults.default_stress_suggestions()
            analysis = NOTES_UNAVAILABLE if mood_log.notes else ""
        else:
            suggestions = await self.assistant.stress_suggestions(context)
            analysis = ""
            if mood_log.notes:
                emotion = await self.assistant.analyze_emotion(mood_log.notes)
                analysis = emotion.get("insights", "")

        return {
            "suggestions": suggestions,
            "aiAnalysis": analysis,
            "crisis": assessment.to_dict(),
        }


# Global handler instance
_handler: Optional[AnalysisHandler] = None


def get_handler() -> AnalysisHandler:
    """Get or create the global handler instance."""
    global _handler
    if _handler is None:
        _handler = AnalysisHandler(assistant=create_assistant())
    return _handler


def set_handler(handler: Optional[AnalysisHandler]) -> None:
    """Set the global handler (for testing)."""
    global _handler
    _handler = handler


def _body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _count(data: Dict[str, Any], field: str) -> int:
    value = data.get(field) or 0
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise InvalidRecordError(f"{field} must be a non-negative integer")
    return value


@app.errorhandler(InvalidRecordError)
def invalid_record(error):
    logger.warning("ANALYSIS_REQUEST_INVALID", extra={"reason": str(error)})
    return jsonify({"error": str(error)}), 400


@app.route("/health", methods=["GET"])
def health():
    """Health check endpoint."""
    return jsonify({"status": "healthy", "service": "analysis-service"})


@app.route("/ready", methods=["GET"])
def ready():
    """Readiness check endpoint."""
    return jsonify({"status": "ready", "service": "analysis-service"})


@app.route("/overview", methods=["POST"])
def overview():
    """Wellness overview.

    Request Body:
        {
            "moodLogs": [{"score": 7, "emotion": "calm", "createdAt": "..."}],
            "breathingDurations": [300, 125],
            "journalCount": 4,
            "chatCount": 2,
            "days": 30 (optional)
        }
    """
    data = _body()
    mood_logs = parse_mood_logs(data.get("moodLogs"))
    durations = data.get("breathingDurations") or []
    if not isinstance(durations, list) or not all(
        isinstance(d, (int, float)) and not isinstance(d, bool) for d in durations
    ):
        raise InvalidRecordError("breathingDurations must be a list of seconds")

    result = get_handler().overview(
        mood_logs,
        durations,
        _count(data, "journalCount"),
        _count(data, "chatCount"),
        data.get("days"),
    )
    return jsonify({"data": result})


@app.route("/stress-report", methods=["POST"])
def stress_report():
    data = _body()
    result = get_handler().stress_report(parse_mood_logs(data.get("moodLogs")), data.get("days"))
    return jsonify({"data": result})


@app.route("/mood-stats", methods=["POST"])
def mood_stats():
    data = _body()
    result = get_handler().mood_stats(parse_mood_logs(data.get("moodLogs")), data.get("days"))
    return jsonify({"data": result})


@app.route("/weekly-summary", methods=["POST"])
def weekly_summary():
    """Narrative weekly summary.

    Request Body:
        {"moodLogs": [...], "themes": ["work", "sleep"]}
    """
    data = _body()
    mood_logs = parse_mood_logs(data.get("moodLogs"))
    themes = [str(theme) for theme in data.get("themes") or []]

    result = asyncio.run(get_handler().weekly_summary(mood_logs, themes))
    return jsonify({"data": result})


@app.route("/mood-insights", methods=["POST"])
def mood_insights():
    """Suggestions for one mood check-in.

    Request Body:
        {"score": 4, "emotion": "stressed", "triggers": ["work"], "notes": "..."}
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Request body required"}), 400
    try:
        mood_log = MoodLog.from_dict(data)
    except (ValueError, TypeError) as e:
        raise InvalidRecordError(str(e)) from e

    result = asyncio.run(get_handler().mood_insights(mood_log))
    return jsonify({"data": result})


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    port = int(os.getenv("PORT", "8003"))
    app.run(host="0.0.0.0", port=port, debug=False)
