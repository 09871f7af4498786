"""Response DTOs for attachments."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from server.apps.files.models import Attachment


class AttachmentResponse(BaseModel):
    """Attachment as returned to API clients."""

    model_config = ConfigDict(frozen=True)

    id: int
    url: str
    filename: str
    mime_type: str
    size_bytes: int
    uploaded_at: datetime


def to_attachment_response(attachment: Attachment) -> AttachmentResponse:
    """Map Attachment entity to its response DTO."""
    return AttachmentResponse(
        id=attachment.id,
        url=attachment.get_url(),
        filename=attachment.original_name or attachment.get_filename(),
        mime_type=attachment.mime_type,
        size_bytes=attachment.size_bytes,
        uploaded_at=attachment.uploaded_at,
    )
