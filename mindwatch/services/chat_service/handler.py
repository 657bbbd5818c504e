"""Chat Service HTTP handler.

Chat sessions are stored by the calling application, which posts the
earlier turns with each message.
"""
import asyncio
import logging
import os
from typing import Any, Dict, List

from flask import Flask, jsonify, request

from mindwatch.services.crisis_service import CrisisClassifier
from mindwatch.services.llm_service import create_assistant
from mindwatch.shared.utils import configure_pii_salt, request_log_context
from .pipeline import CHAT_ROLES, ChatPipeline

logger = logging.getLogger(__name__)

app = Flask(__name__)

pii_salt = os.getenv("PII_HASH_SALT", "default_dev_salt_change_in_production_32chars")
configure_pii_salt(pii_salt)

classifier = CrisisClassifier()
pipeline = ChatPipeline(assistant=create_assistant(), classifier=classifier)


class InvalidHistoryError(ValueError):
    pass


def parse_history(raw: Any) -> List[Dict[str, str]]:
    """Validate posted chat history into {"role", "content"} turns."""
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise InvalidHistoryError("history must be a list")

    turns = []
    for index, turn in enumerate(raw):
        if (
            not isinstance(turn, dict)
            or turn.get("role") not in CHAT_ROLES
            or not isinstance(turn.get("content"), str)
        ):
            raise InvalidHistoryError(f"history[{index}] must have a role and string content")
        turns.append({"role": turn["role"], "content": turn["content"]})
    return turns


@app.route("/health", methods=["GET"])
def health():
    """Health check endpoint."""
    return jsonify({
        "status": "healthy",
        "service": "chat-service",
        "llm_configured": pipeline.assistant is not None,
    }), 200


@app.route("/ready", methods=["GET"])
def ready():
    """Readiness check - the classifier must be available, the LLM is optional."""
    if pipeline.classifier is None:
        return jsonify({"status": "not_ready", "reason": "classifier_not_initialized"}), 503
    return jsonify({"status": "ready"}), 200


@app.route("/chat/message", methods=["POST"])
def chat_message():
    """Process one chat message.

    Request Body:
        {
            "message": "User message",
            "history": [{"role": "user" | "assistant", "content": "..."}],
            "user_id": "user_123" (optional)
        }

    Response:
        {
            "data": {
                "userMessage": str,
                "aiResponse": str,
                "emotionAnalysis": {...},
                "crisisDetected": bool,
                "crisisResources": {...} | null,
                "stressLevel": 0-10,
                "source": "llm_generated" | "fallback"
            }
        }

    Error Handling:
        Unexpected errors return 500 but still carry the classifier's
        crisis assessment for the message.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Message is required"}), 400
    message = data.get("message")
    if not isinstance(message, str) or not message.strip():
        return jsonify({"error": "Message is required"}), 400

    try:
        history = parse_history(data.get("history"))
    except InvalidHistoryError as e:
        return jsonify({"error": str(e)}), 400

    logger.info(
        "CHAT_MESSAGE_RECEIVED",
        extra={
            **request_log_context(data.get("user_id"), message),
            "history_length": len(history),
        }
    )

    try:
        result = asyncio.run(pipeline.process_message(message, history))
    except Exception as e:
        logger.error(
            "CHAT_MESSAGE_ERROR",
            extra={"error": str(e), "error_type": type(e).__name__}
        )
        assessment = classifier.detect_crisis(message)
        return jsonify({
            "error": "Chat processing failed",
            "crisisDetected": assessment.is_crisis,
            "crisisResources": assessment.resources.to_dict() if assessment.resources else None,
        }), 500

    return jsonify({"data": result.to_dict()}), 200


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    port = int(os.getenv("PORT", "8004"))
    app.run(host="0.0.0.0", port=port, debug=False)
