"""
API Gateway proxy response helpers.
"""
import json
from typing import Any, Dict, Optional

from pydantic_core import to_jsonable_python

JSON_HEADERS = {"Content-Type": "application/json"}


def json_response(status_code: int, body: Any) -> Dict[str, Any]:
    """
    Build a proxy response with a JSON body.

    Pydantic models, dates and enums in the body are serialized the same way
    pydantic dumps them in JSON mode.
    """
    return {
        "statusCode": status_code,
        "headers": dict(JSON_HEADERS),
        "body": json.dumps(to_jsonable_python(body))
    }


def success(data: Any = None, message: Optional[str] = None, status_code: int = 200) -> Dict[str, Any]:
    body: Dict[str, Any] = {"status": "success"}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return json_response(status_code, body)


def error(status_code: int, message: str) -> Dict[str, Any]:
    return json_response(status_code, {"status": "error", "message": message})


def csv_response(filename: str, text: str) -> Dict[str, Any]:
    return {
        "statusCode": 200,
        "headers": {
            "Content-Type": "text/csv",
            "Content-Disposition": f'attachment; filename="{filename}"'
        },
        "body": text
    }


def parse_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Decode the JSON request body.

    Raises:
        ValueError: If the body is not a JSON object
    """
    body = event.get("body") or {}
    if isinstance(body, str):
        body = json.loads(body) if body.strip() else {}
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    return body


def query_params(event: Dict[str, Any]) -> Dict[str, str]:
    return event.get("queryStringParameters") or {}


def path_params(event: Dict[str, Any]) -> Dict[str, str]:
    return event.get("pathParameters") or {}


def http_method(event: Dict[str, Any]) -> str:
    """Request method for both REST (v1) and HTTP (v2) API payloads."""
    method = event.get("httpMethod") or (
        (event.get("requestContext") or {}).get("http") or {}
    ).get("method")
    return (method or "GET").upper()
