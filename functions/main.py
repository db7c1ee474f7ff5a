"""Cloud Function entry points for BlockPlane.

Provides HTTP endpoints for:
- Scored insight text (static, or AI when requested and configured)
- Canonical insight lookup
- Cost-carbon comparison of two materials
"""

import asyncio
import json
import os
from typing import Any, Callable, Dict

import structlog
from firebase_functions import https_fn, options
from firebase_admin import initialize_app

from config.settings import settings
from config.errors import BlockPlaneError, ErrorCode, ValidationError
from services.insight_service import (
    handle_canonical_request,
    handle_compare_request,
    handle_insight_request,
)
from utils.logging_config import configure_logging

if settings.use_firebase_emulators:
    os.environ.setdefault("FIRESTORE_EMULATOR_HOST", "127.0.0.1:8081")

# Initialize Firebase Admin SDK
try:
    if settings.firebase_project_id:
        initialize_app(options={"projectId": settings.firebase_project_id})
    else:
        initialize_app()
except ValueError:
    # Already initialized
    pass

configure_logging(settings.log_level)
settings.validate()
logger = structlog.get_logger(__name__)

# ============================================================================
# Helper Functions
# ============================================================================

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Max-Age": "3600"
}


def success_response(data: Any) -> Dict[str, Any]:
    """Build success response."""
    return {"success": True, "data": data}


def error_response(code: str, message: str, details: Dict[str, Any] = None) -> Dict[str, Any]:
    """Build error response."""
    return {
        "success": False,
        "error": {
            "code": code,
            "message": message,
            "details": details or {}
        }
    }


def get_request_json(req: https_fn.Request) -> Dict[str, Any]:
    """Extract JSON from request body.

    Args:
        req: HTTP request object.

    Returns:
        Parsed JSON data.

    Raises:
        ValidationError: If JSON is invalid.
    """
    try:
        return req.get_json(force=True) or {}
    except Exception as e:
        raise ValidationError(
            message=f"Invalid JSON in request body: {str(e)}"
        )


def _cors_response() -> https_fn.Response:
    """Return CORS preflight response."""
    return https_fn.Response(
        "",
        status=204,
        headers=CORS_HEADERS
    )


def _json_response(data: dict, status: int = 200) -> https_fn.Response:
    """Return JSON response with CORS headers."""
    return https_fn.Response(
        json.dumps(data, default=str),
        status=status,
        mimetype="application/json",
        headers=CORS_HEADERS
    )


def _status_for(error: BlockPlaneError) -> int:
    if isinstance(error, ValidationError):
        return 400
    if error.code == ErrorCode.EXPORT_TARGET_NOT_FOUND:
        return 404
    return 500


def _handle(req: https_fn.Request, handler: Callable[[Any], Any], endpoint: str) -> https_fn.Response:
    """Run a JSON handler and wrap its result or error."""
    if req.method == "OPTIONS":
        return _cors_response()

    try:
        data = get_request_json(req)
        result = handler(data)
        if asyncio.iscoroutine(result):
            result = asyncio.run(result)
        return _json_response(success_response(result))

    except BlockPlaneError as e:
        logger.warning(f"{endpoint}_rejected", code=e.code, error=e.message)
        return _json_response(
            error_response(e.code, e.message, e.details),
            status=_status_for(e)
        )
    except Exception as e:
        logger.exception(f"{endpoint}_error", error=str(e))
        return _json_response(
            error_response(
                ErrorCode.INTERNAL_ERROR,
                f"Failed to handle {endpoint} request: {str(e)}"
            ),
            status=500
        )


# ============================================================================
# Endpoints
# ============================================================================


@https_fn.on_request(
    timeout_sec=60,
    memory=options.MemoryOption.MB_256,
    region="us-central1"
)
def insight(req: https_fn.Request) -> https_fn.Response:
    """Score a material and return insight text.

    Request body:
    {
        "lis": 42, "ris": 68, "cpi": 9.1,
        "quadrant": "Regenerative",       // Optional: derived from LIS/RIS
        "risComponents": {...},           // Optional
        "parisAlignment": 80,
        "materialName": "Hempcrete",      // Optional
        "category": "Insulation",         // Optional
        "contextNote": "...",             // Optional
        "useAI": false
    }

    Response:
    {
        "success": true,
        "data": {
            "scores": {...},
            "insightText": {"short": "...", "details": "...", "source": "static"}
        }
    }
    """
    return _handle(req, handle_insight_request, "insight")


@https_fn.on_request(
    timeout_sec=30,
    memory=options.MemoryOption.MB_256,
    region="us-central1"
)
def canonical_insight(req: https_fn.Request) -> https_fn.Response:
    """Find the curated insight for a context.

    Request body:
    {
        "type": "comparison",
        "primaryId": "rammed_earth",
        "materialIds": ["rammed_earth", "hempcrete", "wood_framing_2x6"],
        "tags": []
    }

    Response data is the canonical insight, or null when none matches.
    """
    return _handle(req, handle_canonical_request, "canonical_insight")


@https_fn.on_request(
    timeout_sec=30,
    memory=options.MemoryOption.MB_256,
    region="us-central1"
)
def compare(req: https_fn.Request) -> https_fn.Response:
    """Compare an alternative material against a baseline.

    Request body:
    {
        "baseline": {...material...},
        "alternative": {...material...},
        "assumptions": {"energySavingsPerYear": 0, ...},  // Optional
        "regionId": "nyc"                                 // Optional
    }

    Response data holds metrics, breakEven and formatted strings.
    """
    return _handle(req, handle_compare_request, "compare")
