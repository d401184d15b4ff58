from fastapi import Response
from fastapi.responses import JSONResponse
from typing import Optional, Any, List
from pydantic import BaseModel
from datetime import date, datetime
from enum import Enum
import json


class CustomJSONEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        # Handle Pydantic models
        if isinstance(obj, BaseModel):
            return obj.model_dump(mode="json", by_alias=True)
        return str(obj)


def build_response(
    status_code: int,
    success: bool = True,
    message: str = None,
    data: Any = None,
    error: Optional[str] = None,
    errors: Optional[List[Any]] = None,
    extra: Optional[dict] = None,
) -> Response:
    if status_code == 204:
        return Response(status_code=204)

    response = {"success": success}

    if extra:
        response.update(json.loads(json.dumps(extra, cls=CustomJSONEncoder)))

    if message is not None:
        response["message"] = message

    if data is not None:
        if isinstance(data, BaseModel):
            response["data"] = data.model_dump(mode="json", by_alias=True)
        elif isinstance(data, list) and all(isinstance(item, BaseModel) for item in data):
            response["data"] = [item.model_dump(mode="json", by_alias=True) for item in data]
        else:
            response["data"] = json.loads(json.dumps(data, cls=CustomJSONEncoder))

    if error is not None:
        response["error"] = error

    if errors is not None:
        response["errors"] = json.loads(json.dumps(errors, cls=CustomJSONEncoder))

    return JSONResponse(
        content=response,
        status_code=status_code,
        media_type="application/json"
    )
