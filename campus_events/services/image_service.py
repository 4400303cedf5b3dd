"""
Image Service
Uploads base64 data-URI images to Cloudinary and returns the public URL.
Anything that is not a data URI is treated as an existing URL and passed through.
"""

import logging

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader
from flask import current_app

from campus_events.errors import ImageUploadError

logger = logging.getLogger(__name__)

PROFILE_PICTURE_FOLDER = 'profile_pictures'
EVENT_IMAGE_FOLDER = 'event_images'


def is_data_uri(value):
    return isinstance(value, str) and value.startswith('data:image')


def _configure():
    cloud_name = current_app.config.get('CLOUDINARY_CLOUD_NAME')
    api_key = current_app.config.get('CLOUDINARY_API_KEY')
    api_secret = current_app.config.get('CLOUDINARY_API_SECRET')
    if not (cloud_name and api_key and api_secret):
        raise ImageUploadError('Image upload service is not configured')

    cloudinary.config(cloud_name=cloud_name, api_key=api_key, api_secret=api_secret, secure=True)


def upload_image(data, folder):
    """
    Upload an image to the configured Cloudinary account.

    Returns the secure URL of the stored image, or `data` unchanged when it
    is not a data URI. Raises ImageUploadError on any upstream failure.
    """
    if not is_data_uri(data):
        return data

    _configure()
    try:
        result = cloudinary.uploader.upload(
            data,
            folder=folder,
            timeout=current_app.config.get('IMAGE_UPLOAD_TIMEOUT', 30),
        )
    except cloudinary.exceptions.Error as e:
        logger.error("Error calling image upload service: %s", e)
        raise ImageUploadError(f"Error uploading image: {e}") from e

    url = result.get('secure_url')
    if not url:
        raise ImageUploadError('Error uploading image: no URL returned')

    logger.info("Uploaded image to folder %s", folder)
    return url
