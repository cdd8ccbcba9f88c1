# backend/portfolio_dashboard/routes/snapshot.py
import json

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from ..models.portfolio import HoldingsValidationError, parse_snapshot_request
from ..services.portfolio import SnapshotService
from ..utils.logger import setup_logger

logger = setup_logger(__name__)

router = APIRouter()


def get_snapshot_service(request: Request) -> SnapshotService:
    return request.app.state.snapshot_service


def _snapshot_response(snapshot) -> JSONResponse:
    return JSONResponse(content=snapshot.model_dump(mode="json", by_alias=True, exclude_none=True))


def _error_response(status_code: int, error: str, details=None) -> JSONResponse:
    content = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


@router.get("")
async def get_snapshot(service: SnapshotService = Depends(get_snapshot_service)):
    try:
        snapshot = await service.build_snapshot()
        return _snapshot_response(snapshot)
    except Exception as e:
        logger.error(f"Error generating portfolio snapshot: {str(e)}")
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to generate portfolio snapshot")


@router.post("")
async def post_snapshot(request: Request, service: SnapshotService = Depends(get_snapshot_service)):
    body = await request.body()
    try:
        payload = json.loads(body) if body.strip() else None
    except json.JSONDecodeError as e:
        return _error_response(
            status.HTTP_400_BAD_REQUEST, "Invalid request body",
            [{"loc": ["body"], "msg": f"Malformed JSON: {e.msg}", "type": "json_invalid"}],
        )

    try:
        snapshot_request = parse_snapshot_request(payload)
        snapshot = await service.build_snapshot(snapshot_request.holdings)
        return _snapshot_response(snapshot)
    except HoldingsValidationError as e:
        logger.warning(f"Rejected snapshot request: {str(e)}")
        return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body", e.errors)
    except Exception as e:
        logger.error(f"Error generating portfolio snapshot: {str(e)}")
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to generate portfolio snapshot")
