import io
import logging
from datetime import datetime

from bson import ObjectId

from jobboard.database import get_fs_bucket
from jobboard.utils.errors import Internal

logger = logging.getLogger(__name__)


async def store_document(filename: str, content: bytes, content_type: str, metadata: dict) -> ObjectId:
    """Upload a CV to GridFS and return its file id."""
    fs_bucket = get_fs_bucket()
    if fs_bucket is None:
        raise Internal("Document storage is not available")

    try:
        file_id = await fs_bucket.upload_from_stream(
            filename=filename,
            source=io.BytesIO(content),
            metadata={
                **metadata,
                "content_type": content_type,
                "uploaded_at": datetime.utcnow(),
            },
        )
    except Exception as exc:
        logger.error("Storing %s failed: %s", filename, exc)
        raise Internal("Failed to store document", detail=str(exc)) from exc

    return file_id
