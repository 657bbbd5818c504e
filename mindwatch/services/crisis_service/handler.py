"""Crisis Service HTTP handler.

Every chat message, mood note and journal entry passes through /detect
before any LLM call. No raw text or user identifiers are logged.
"""
import logging
import os

from flask import Flask, jsonify, request

from mindwatch.shared.utils import configure_pii_salt, request_log_context
from .classifier import CrisisClassifier
from .config import CRISIS_RESOURCES, ClassifierConfig

logger = logging.getLogger(__name__)

app = Flask(__name__)

pii_salt = os.getenv("PII_HASH_SALT", "default_dev_salt_change_in_production_32chars")
configure_pii_salt(pii_salt)

config = ClassifierConfig(
    keyword_version=os.getenv("KEYWORD_VERSION", "2026.02.01"),
)
classifier = CrisisClassifier(config=config)


@app.route("/health", methods=["GET"])
def health():
    """Health check endpoint."""
    return jsonify({
        "status": "healthy",
        "service": "crisis-service",
        "keyword_version": config.keyword_version,
    }), 200


@app.route("/ready", methods=["GET"])
def ready():
    """Readiness check - verifies the classifier is initialized."""
    if classifier is None:
        return jsonify({"status": "not_ready", "reason": "classifier_not_initialized"}), 503
    return jsonify({"status": "ready"}), 200


@app.route("/detect", methods=["POST"])
def detect():
    """Classify a piece of text for crisis and stress language.

    Request Body:
        {
            "text": "User message",
            "user_id": "user_123" (optional),
            "source": "chat" | "mood" | "journal" (optional)
        }

    Response:
        {
            "isCrisis": bool,
            "isStress": bool,
            "severity": "none" | "low" | "moderate" | "high" | "critical",
            "detectedKeywords": [...],
            "resources": {...} | null,
            "stressLevel": 0-10
        }

    Error Handling:
        On unexpected errors the response still carries crisis resources
        so the client can show help. This endpoint never fails open.
    """
    try:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            logger.warning("DETECT_REQUEST_INVALID", extra={"reason": "empty_body"})
            return jsonify({"error": "Request body required"}), 400

        text = data.get("text")
        if text is None:
            logger.warning("DETECT_REQUEST_INVALID", extra={"reason": "missing_text"})
            return jsonify({"error": "Missing required field: text"}), 400
        if not isinstance(text, str):
            return jsonify({"error": "Field text must be a string"}), 400

        logger.info(
            "DETECT_REQUESTED",
            extra={
                **request_log_context(data.get("user_id"), text),
                "source": data.get("source", "unknown"),
            }
        )

        result = classifier.assess(text)
        return jsonify(result.to_dict()), 200

    except Exception as e:
        logger.error(
            "DETECT_ERROR",
            extra={
                "error": str(e),
                "error_type": type(e).__name__,
                "action": "RETURNING_RESOURCES",
            }
        )
        return jsonify({
            "isCrisis": False,
            "isStress": True,
            "severity": "low",
            "detectedKeywords": [],
            "resources": CRISIS_RESOURCES.to_dict(),
            "stressLevel": 0,
            "error": "Classifier error - returning support resources",
        }), 200


@app.route("/stress-level", methods=["POST"])
def stress_level():
    """Score text on the 0-10 stress scale.

    Request Body:
        {"text": "User message"}

    Response:
        {"stressLevel": 0-10}
    """
    data = request.get_json(silent=True)
    text = data.get("text") if isinstance(data, dict) else None
    if not isinstance(text, str):
        return jsonify({"error": "Missing required field: text"}), 400

    return jsonify({"stressLevel": classifier.calculate_stress_level(text)}), 200


@app.route("/resources", methods=["GET"])
def resources():
    """Static crisis resources, for clients that show them proactively."""
    return jsonify(CRISIS_RESOURCES.to_dict()), 200


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    port = int(os.getenv("PORT", "8001"))
    app.run(host="0.0.0.0", port=port, debug=False)
