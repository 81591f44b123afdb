"""Pre-signed S3 upload URLs for product images."""

import uuid
from typing import Any, Dict

from botocore.exceptions import BotoCoreError, ClientError

from service.handlers.utils.errors import InternalError
from service.handlers.utils.observability import logger, tracer
from service.models import constants
from service.models.output import PresignedUrlOutput


def content_type_for(file_name: str) -> str:
    """Content type from the file extension; unknown extensions fall back to JPEG."""
    extension = file_name.rsplit('.', 1)[-1].lower() if '.' in file_name else ''
    return constants.IMAGE_CONTENT_TYPES.get(extension, constants.DEFAULT_IMAGE_CONTENT_TYPE)


class ImageUploadService:
    def __init__(self, s3_client: Any, bucket_name: str) -> None:
        self.s3_client = s3_client
        self.bucket_name = bucket_name

    @tracer.capture_method
    def create_upload_url(self, file_name: str) -> Dict[str, Any]:
        """
        Generate a unique object key and a pre-signed PUT URL for it.

        Args:
            file_name: Client file name, already validated

        Returns:
            ``{fileName, url, expiresIn}``
        """
        key = f'{uuid.uuid4()}-{file_name}'
        try:
            url = self.s3_client.generate_presigned_url(
                'put_object',
                Params={'Bucket': self.bucket_name, 'Key': key, 'ContentType': content_type_for(file_name)},
                ExpiresIn=constants.UPLOAD_URL_EXPIRES_SECONDS,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error('Failed to sign upload URL', extra={'error_type': exc.__class__.__name__})
            raise InternalError('Could not generate upload URL') from exc

        logger.info('Upload URL generated', extra={'object_key': key})
        return PresignedUrlOutput(
            file_name=key,
            url=url,
            expires_in=constants.UPLOAD_URL_EXPIRES_LABEL,
        ).to_response()
