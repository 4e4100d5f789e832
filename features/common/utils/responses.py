import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder

from features.common.exceptions.pipeline_exceptions import PipelineError

logger = logging.getLogger(__name__)

def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()

def success_response(
    message: str,
    data: Optional[Any] = None,
    status_code: int = 200,
    **extra: Any
) -> JSONResponse:
    body = {"success": True, "message": message, "timestamp": _timestamp(), **extra}
    if data is not None:
        body["data"] = data
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))

def error_response(error: str, status_code: int = 200, **extra: Any) -> JSONResponse:
    body = {"success": False, "error": error, "timestamp": _timestamp(), **extra}
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))

async def handle_function(name: str, call: Callable[[], Awaitable[JSONResponse]]) -> JSONResponse:
    """Run a pipeline function and translate failures into response bodies.

    Pipeline failures are part of the normal contract and answer 200 with
    success false; anything else is a server error.
    """
    try:
        return await call()
    except PipelineError as e:
        logger.warning(f"⚠️ {name} failed: {str(e)}")
        return error_response(str(e))
    except Exception as e:
        logger.error(f"❌ Unexpected error in {name}: {str(e)}", exc_info=True)
        return error_response(str(e), status_code=500)
