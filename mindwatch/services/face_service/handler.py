"""Face Service HTTP handler.

The browser runs the face detector and posts one expression frame per
tick (~4 Hz). Each camera session gets its own ExpressionProcessor held
in memory; sessions are not persisted.

Sessions idle for longer than SESSION_IDLE_SECONDS are dropped, and at
most MAX_SESSIONS are kept (least recently used evicted first), so tabs
closed without a DELETE do not accumulate.
"""
import asyncio
import logging
import os
import threading
import time
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from mindwatch.services.llm_service import create_assistant
from mindwatch.services.llm_service.defaults import default_face_analysis
from .config import ExpressionConfig
from .processor import (
    ExpressionProcessor,
    compute_stress_score,
    dominant_expression,
    get_stress_label,
    normalize_frame,
    summarize_trend,
)

logger = logging.getLogger(__name__)

app = Flask(__name__)

config = ExpressionConfig()
assistant = create_assistant()

SESSION_IDLE_SECONDS = 15 * 60
MAX_SESSIONS = 500


@dataclass
class FaceSession:
    """One camera session and when it was last touched."""
    processor: ExpressionProcessor
    last_seen: float = field(default_factory=time.monotonic)


# Guards the map and every processor in it; processors are not thread-safe
_sessions: "OrderedDict[str, FaceSession]" = OrderedDict()
_sessions_lock = threading.Lock()


def _cleanup_sessions(now: float) -> None:
    """Drop idle sessions, then the oldest ones past MAX_SESSIONS. Caller holds the lock."""
    stale_ids = [
        session_id
        for session_id, session in _sessions.items()
        if now - session.last_seen > SESSION_IDLE_SECONDS
    ]
    for session_id in stale_ids:
        _sessions.pop(session_id, None)

    evicted = len(stale_ids)
    while len(_sessions) > MAX_SESSIONS:
        _sessions.popitem(last=False)
        evicted += 1

    if evicted:
        logger.info(
            "FACE_SESSIONS_EVICTED",
            extra={"evicted": evicted, "active_sessions": len(_sessions)}
        )


def _touch(session_id: str) -> Optional[FaceSession]:
    """Look up a live session and mark it used. Caller holds the lock."""
    now = time.monotonic()
    _cleanup_sessions(now)
    session = _sessions.get(session_id)
    if session is not None:
        session.last_seen = now
        _sessions.move_to_end(session_id)
    return session


def _json_object() -> Optional[Dict[str, Any]]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


def _session_summary(session_id: str, processor: ExpressionProcessor) -> dict:
    timeline = processor.timeline
    return {
        "session_id": session_id,
        "frames": processor.frames_seen,
        "samples": processor.history_length,
        "timeline": [sample.to_dict() for sample in timeline],
        "trend": summarize_trend(timeline),
    }


@app.route("/health", methods=["GET"])
def health():
    """Health check endpoint."""
    return jsonify({
        "status": "healthy",
        "service": "face-service",
        "llm_configured": assistant is not None,
    }), 200


@app.route("/ready", methods=["GET"])
def ready():
    """Readiness check. The LLM is optional, so only the processor config matters."""
    with _sessions_lock:
        _cleanup_sessions(time.monotonic())
        active = len(_sessions)
    return jsonify({"status": "ready", "active_sessions": active}), 200


@app.route("/sessions", methods=["POST"])
def start_session():
    """Open a new camera session with an empty history."""
    session_id = f"face_{uuid.uuid4().hex[:12]}"
    with _sessions_lock:
        _sessions[session_id] = FaceSession(processor=ExpressionProcessor(config))
        _cleanup_sessions(time.monotonic())

    logger.info("FACE_SESSION_STARTED", extra={"session_id": session_id})
    return jsonify({"session_id": session_id}), 201


@app.route("/sessions/<session_id>/frames", methods=["POST"])
def ingest_frame(session_id: str):
    """Add one detector frame and return the smoothed reading.

    Request Body:
        {"expressions": {"happy": 0.1, "sad": 0.0, ..., "neutral": 0.8}}

    Response:
        {
            "expressions": {...smoothed...},
            "stressScore": 0-100,
            "stressLevel": "Very Relaxed" ... "Very High Stress",
            "dominantEmotion": "neutral",
            "samples": 1-12
        }
    """
    data = _json_object() or {}
    expressions = data.get("expressions")

    with _sessions_lock:
        session = _touch(session_id)
        if session is None:
            return jsonify({"error": "Session not found"}), 404
        if not isinstance(expressions, dict):
            return jsonify({"error": "Expression data is required"}), 400
        reading = session.processor.process(expressions)

    return jsonify(reading.to_dict()), 200


@app.route("/sessions/<session_id>", methods=["GET"])
def get_session(session_id: str):
    with _sessions_lock:
        session = _touch(session_id)
        if session is None:
            return jsonify({"error": "Session not found"}), 404
        summary = _session_summary(session_id, session.processor)
    return jsonify(summary), 200


@app.route("/sessions/<session_id>", methods=["DELETE"])
def end_session(session_id: str):
    """Close a session and return its final summary."""
    with _sessions_lock:
        session = _touch(session_id)
        if session is None:
            return jsonify({"error": "Session not found"}), 404
        del _sessions[session_id]
        summary = _session_summary(session_id, session.processor)

    logger.info(
        "FACE_SESSION_ENDED",
        extra={
            "session_id": session_id,
            "frames": summary["frames"],
            "trend": summary["trend"]["direction"] if summary["trend"] else None,
        }
    )
    return jsonify(summary), 200


@app.route("/score", methods=["POST"])
def score():
    """Score an already-smoothed expression vector without session state."""
    data = _json_object() or {}
    expressions = data.get("expressions")
    if not isinstance(expressions, dict):
        return jsonify({"error": "Expression data is required"}), 400

    stress_score = compute_stress_score(expressions)
    return jsonify({
        "stressScore": stress_score,
        "stressLevel": get_stress_label(stress_score).value,
        "dominantEmotion": dominant_expression(normalize_frame(expressions)).value,
    }), 200


@app.route("/analyze", methods=["POST"])
def analyze():
    """Narrative analysis of a face session by the LLM.

    Request Body:
        {
            "expressions": {...},
            "stressScore": 42,
            "dominantEmotion": "neutral",
            "sessionDuration": 30,
            "sessionHistory": [{"stress": 40}, ...],
            "voiceTranscript": "optional"
        }

    Falls back to a static analysis when the LLM is not configured.
    """
    data = _json_object() or {}
    expressions = data.get("expressions")
    if not isinstance(expressions, dict):
        return jsonify({"error": "Expression data is required"}), 400

    if assistant is None:
        return jsonify({
            "data": default_face_analysis(
                data.get("stressScore", 30),
                data.get("dominantEmotion") or "neutral",
            ),
            "fallback": True,
        }), 200

    try:
        analysis = asyncio.run(assistant.analyze_face(data))
    except Exception as e:
        logger.error(
            "FACE_ANALYSIS_ERROR",
            extra={"error": str(e), "error_type": type(e).__name__}
        )
        return jsonify({
            "error": "Analysis failed",
            "data": default_face_analysis(
                data.get("stressScore", 30),
                data.get("dominantEmotion") or "neutral",
            ),
        }), 500

    return jsonify({"data": analysis}), 200


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    port = int(os.getenv("PORT", "8002"))
    app.run(host="0.0.0.0", port=port, debug=False)
