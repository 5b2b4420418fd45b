"""
API Blueprint

- GET  /          upload page
- GET  /health    service and OpenAI configuration status
- POST /analyze   one document in, rendered four-section report out

The /api/* aliases serve clients written against the older paths.
"""
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, render_template, request

from lexscan.report import render_error, render_error_html, render_report_html, render_results
from lexscan.services.openai_service import analyze_document, client_ready, model_name
from lexscan.services.upload_service import (
    NO_FILE_ERROR,
    UploadError,
    inspect_upload,
    temporary_upload,
    validate_upload,
)

api_bp = Blueprint('api', __name__)


def now_utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def error_response(message: str, status: int):
    display = render_error(message)
    return jsonify({
        "success": False,
        "error": display.message,
        "errorHtml": str(render_error_html(display)),
    }), status


@api_bp.route("/", methods=["GET"])
def index():
    return render_template("index.html", version=current_app.config.get("APP_VERSION", ""))


@api_bp.route("/health", methods=["GET"])
@api_bp.route("/api/health", methods=["GET"])
def health():
    ok, _ = client_ready()
    return jsonify({
        "status": "healthy",
        "timestamp": now_utc_iso(),
        "openaiConfigured": ok,
        "model": model_name(),
        "version": current_app.config.get("APP_VERSION", ""),
    }), 200


@api_bp.route("/analyze", methods=["POST"])
@api_bp.route("/api/analyze", methods=["POST"])
def analyze():
    file = request.files.get("document") or request.files.get("file")
    if not file or not file.filename:
        return error_response(NO_FILE_ERROR, 400)

    filename = file.filename
    data = file.read()
    try:
        ext = validate_upload(filename, file.mimetype, len(data), current_app.config["MAX_UPLOAD_SIZE"])
    except UploadError as e:
        current_app.logger.info("Rejected upload %s: %s", filename, e.message)
        return error_response(e.message, e.status)

    ok, msg = client_ready()
    if not ok:
        return error_response(msg, 500)

    current_app.logger.info("Analyzing file: %s (%d bytes)", filename, len(data))

    try:
        with temporary_upload(data, filename) as path:
            meta = inspect_upload(path, ext)
            doc, err = analyze_document(path, filename)
    except UploadError as e:
        current_app.logger.info("Rejected upload %s: %s", filename, e.message)
        return error_response(e.message, e.status)

    if err or doc is None:
        current_app.logger.error("Analysis error for %s: %s", filename, err)
        return error_response(err or "Analysis failed", 500)

    report = render_results(doc.text, doc.file_name, doc.completed_at)
    return jsonify({
        "success": True,
        "analysisText": doc.text,
        "fileName": doc.file_name,
        "fileType": doc.file_type,
        "timestamp": doc.timestamp,
        **meta,
        "sections": {section.key: section.text for section in report.sections},
        "reportHtml": str(render_report_html(report)),
    }), 200
