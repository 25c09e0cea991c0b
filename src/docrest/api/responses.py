# src/docrest/api/responses.py
"""Success and failure payload shaping."""

import math
from typing import Any, Dict, List, Optional

from fastapi.responses import JSONResponse, StreamingResponse

from docrest.core.errors import DEFAULT_ERROR_MESSAGE
from docrest.db.store import ResultSet
from docrest.query.fields import FieldSpec, project
from docrest.query.pagination import normalize_paging

NOT_FOUND_BODY = {"error": "not found"}
PROJECTION_MEDIA_TYPE = "application/octet-stream"


def envelope(result: ResultSet) -> Dict[str, Any]:
    """Wrap a page of documents in the public `{results, paging}` envelope."""
    return {
        "results": result.records,
        "paging": normalize_paging(result.page_info),
    }


def projection_response(records: List[Any], fields: List[FieldSpec]) -> StreamingResponse:
    """Stream the projected field values back to back, with no envelope."""
    return StreamingResponse(project(records, fields), media_type=PROJECTION_MEDIA_TYPE)


def numeric_code(exc: BaseException) -> Optional[float]:
    code = getattr(exc, "code", None)
    if isinstance(code, bool) or not isinstance(code, (int, float)):
        return None
    return code if math.isfinite(code) else None


def error_status(exc: BaseException) -> int:
    """Use the error's numeric code as HTTP status when it is one, else 500."""
    code = numeric_code(exc)
    if code is None or not 100 <= int(code) <= 599:
        return 500
    return int(code)


def error_body(exc: BaseException) -> Dict[str, Any]:
    message = getattr(exc, "message", None)
    if not isinstance(message, str) or not message:
        message = str(exc) or DEFAULT_ERROR_MESSAGE

    error: Dict[str, Any] = {"message": message}
    code = numeric_code(exc)
    if code is not None:
        error["code"] = code
    return {"error": error}


def error_response(exc: BaseException) -> JSONResponse:
    return JSONResponse(status_code=error_status(exc), content=error_body(exc))


def not_found_response() -> JSONResponse:
    return JSONResponse(status_code=404, content=NOT_FOUND_BODY)
