"""
Media uploader - pushes encoded images to the image host
"""
import logging
from typing import Optional

import requests

from config import settings

logger = logging.getLogger(__name__)


class MediaUploader:
    """
    Uploads base64 data-URL images (resident photos, ID documents) and
    returns the hosted URL. Any failure falls back to the original encoded
    image so the calling operation can still store it inline.
    """

    def __init__(
        self,
        upload_url: str = None,
        upload_preset: str = None,
        api_key: str = None,
        timeout: int = None,
        session: Optional[requests.Session] = None,
    ):
        self.upload_url = upload_url or settings.MEDIA_UPLOAD_URL
        self.upload_preset = upload_preset or settings.MEDIA_UPLOAD_PRESET
        self.api_key = api_key or settings.MEDIA_API_KEY
        self.timeout = timeout or settings.MEDIA_TIMEOUT
        self.session = session or requests.Session()

    def upload(self, encoded_image: str) -> str:
        """Upload an image and return its URL, or the image itself on failure"""
        if not encoded_image:
            return encoded_image

        form = {
            'file': encoded_image,
            'upload_preset': self.upload_preset,
        }
        if self.api_key:
            form['api_key'] = self.api_key

        try:
            response = self.session.post(self.upload_url, data=form, timeout=self.timeout)
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Media upload failed, keeping inline image: {e}")
            return encoded_image

        url = data.get('secure_url')
        if url:
            return url

        error = (data.get('error') or {}).get('message', 'Upload failed')
        logger.error(f"Media upload rejected, keeping inline image: {error}")
        return encoded_image
