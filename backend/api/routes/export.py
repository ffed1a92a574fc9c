"""
Protobuf export endpoint
"""
from fastapi import APIRouter, Depends
from fastapi.responses import Response
import logging

from backend.api.dependencies import get_export_service
from backend.core.config import get_settings
from backend.core.users import ExportService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users/export", tags=["export"])

PROTOBUF_MEDIA_TYPE = "application/x-protobuf"


@router.get("", response_class=Response)
def export_users(service: ExportService = Depends(get_export_service)):
    """
    Export all users as one protobuf `qt.UserList` message.

    Each entry carries the email digest, signature and SPKI DER public key so
    clients can verify every record independently.
    """
    data = service.build_users_protobuf()
    filename = get_settings().export_filename

    logger.info(f"Users exported successfully: {len(data)} bytes")
    return Response(
        content=data,
        media_type=PROTOBUF_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
