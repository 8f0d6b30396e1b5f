"""
Serverless-function entry point for ``/api/transform``.

For runtimes that call ``handler(event, context)`` with a Lambda-style event
(``httpMethod``, ``body``, ``isBase64Encoded``) and expect
``{statusCode, headers, body}`` back. The FastAPI router in ``api/transform.py``
serves the same contract through the same TransformProxy.
"""
import asyncio
import base64
import json
from typing import Any, Dict, Optional

from services.transform_service import TransformProxy, get_transform_proxy

def handler(event: Dict[str, Any], context: Any = None, proxy: Optional[TransformProxy] = None) -> Dict[str, Any]:
    proxy = proxy or get_transform_proxy()

    method = event.get("httpMethod") or "GET"
    body = event.get("body") or ""
    if body and event.get("isBase64Encoded"):
        body = base64.b64decode(body)

    result = asyncio.run(proxy.dispatch(method, body))

    headers = dict(result.headers)
    if result.body is not None:
        headers["Content-Type"] = "application/json"

    return {
        "statusCode": result.status_code,
        "headers": headers,
        "body": json.dumps(result.body) if result.body is not None else ""
    }
