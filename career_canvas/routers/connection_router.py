# career_canvas/routers/connection_router.py
from fastapi import APIRouter, Depends

from ..dependencies.service_dependencies import get_connection_service
from ..schemas import ConnectionRequestInput, ConnectionSubmittedResponse, TokenData
from ..security import get_current_user
from ..services import ConnectionService

router = APIRouter(prefix="/api", tags=["connections"])


@router.post("/submitConnectionRequest", response_model=ConnectionSubmittedResponse, status_code=201)
async def submit_connection_request(
    request_data: ConnectionRequestInput,
    current_user: TokenData = Depends(get_current_user),
    connection_service: ConnectionService = Depends(get_connection_service),
):
    """Ask a mentor to connect; the request starts out pending"""
    connection = connection_service.submit(current_user.id, request_data)
    return ConnectionSubmittedResponse(
        connection_id=connection.id,
        message="Connection request submitted successfully",
    )
