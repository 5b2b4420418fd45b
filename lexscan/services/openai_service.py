"""OpenAI wrapper.

Sends one uploaded document with the fixed legal analysis prompt and returns
the model's free-text answer. Failures come back as an error string, never as
an exception.
"""
from __future__ import annotations

import base64
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from flask import current_app
from openai import OpenAI

from lexscan.services.upload_service import file_extension, mime_type_for

ANALYSIS_PROMPT = """
Analyze this legal document and provide a detailed assessment in the following format:

KEY IMPORTANT POINTS:
- Identify and highlight critical clauses, terms, deadlines, and obligations
- Payment terms, amounts, and due dates
- Liability and indemnification clauses
- Termination conditions and notice requirements
- Intellectual property rights and restrictions
- Governing law and jurisdiction

SUSPICIOUS ELEMENTS:
- Unusual or non-standard terms that may be problematic
- Missing standard clauses that should be present
- Ambiguous language that could lead to disputes
- Terms heavily favoring one party
- Potential red flags or concerning provisions

RISK ASSESSMENT:
- Overall risk level (Low/Medium/High) with explanation
- Financial risks and exposure
- Legal compliance risks
- Operational risks
- Relationship risks

RECOMMENDATIONS:
- Specific items that require careful review or negotiation
- Suggested modifications or additions
- Areas where legal counsel should be consulted
- Due diligence items to verify

Please be thorough and practical in your analysis.
""".strip()


@dataclass(frozen=True)
class AnalysisDocument:
    text: str
    file_name: str
    file_type: str
    completed_at: datetime

    @property
    def timestamp(self) -> str:
        return self.completed_at.isoformat()


def client_ready() -> Tuple[bool, str]:
    key = (current_app.config.get("OPENAI_API_KEY") or "").strip()
    if not key:
        return False, "OpenAI API key not configured"
    return True, ""


def model_name() -> str:
    return (current_app.config.get("OPENAI_MODEL") or "").strip() or "gpt-4.1"


def get_client():
    ok, _ = client_ready()
    if not ok:
        return None
    key = current_app.config["OPENAI_API_KEY"].strip()
    return OpenAI(api_key=key, timeout=current_app.config.get("OPENAI_TIMEOUT", 60))


def document_part(data: bytes, filename: str) -> Dict[str, Any]:
    """Build the chat content part carrying the encoded document."""
    ext = file_extension(filename)
    encoded = base64.b64encode(data).decode("ascii")
    if ext == ".pdf":
        return {
            "type": "file",
            "file": {
                "filename": filename,
                "file_data": f"data:application/pdf;base64,{encoded}",
            },
        }
    return {
        "type": "image_url",
        "image_url": {"url": f"data:{mime_type_for(ext)};base64,{encoded}"},
    }


def analysis_messages(data: bytes, filename: str) -> List[Dict[str, Any]]:
    return [{
        "role": "user",
        "content": [
            {"type": "text", "text": ANALYSIS_PROMPT},
            document_part(data, filename),
        ],
    }]


def analyze_document(path: str, filename: str) -> Tuple[Optional[AnalysisDocument], str]:
    """Run the legal analysis for the file stored at path."""
    client = get_client()
    if client is None:
        ok, msg = client_ready()
        return None, msg or "Client not available"

    try:
        with open(path, "rb") as f:
            data = f.read()
        res = client.chat.completions.create(
            model=model_name(),
            messages=analysis_messages(data, filename),
            temperature=current_app.config.get("OPENAI_TEMPERATURE", 0.2),
        )
        text = (res.choices[0].message.content or "").strip()
    except Exception as e:
        current_app.logger.exception("Error in analyze_document")
        return None, f"Analysis failed: {type(e).__name__}: {e}"

    if not text:
        return None, "Analysis failed: Empty model output"

    return AnalysisDocument(
        text=text,
        file_name=filename,
        file_type=file_extension(filename),
        completed_at=datetime.now(timezone.utc),
    ), ""
