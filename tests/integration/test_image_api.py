"""
Integration tests for the image upload Lambda with S3 mocked by moto.
"""

import json

import boto3
import pytest
from moto import mock_aws

from service.handlers import image_handler

BUCKET = "test-product-images"


@pytest.fixture
def call(make_event, lambda_context):
    """Invoke the image handler and return ``(status_code, body)``."""
    with mock_aws():
        boto3.client("s3", region_name="eu-central-1").create_bucket(
            Bucket=BUCKET, CreateBucketConfiguration={"LocationConstraint": "eu-central-1"}
        )

        def _call(**event_args):
            event_args.setdefault("path", "/image")
            response = image_handler.lambda_handler(make_event(**event_args), lambda_context)
            return response["statusCode"], json.loads(response["body"])

        yield _call


@pytest.mark.integration
class TestImageUpload:
    """Test cases for GET /image?file=..."""

    def test_upload_url(self, call):
        status, body = call(query={"file": "phone.png"})

        assert status == 200
        assert body["message"] == "URL firmada generada correctamente"
        assert body["data"]["fileName"].endswith("-phone.png")
        assert body["data"]["expiresIn"] == "24 hours"
        assert body["data"]["url"].startswith("https://")
        assert BUCKET in body["data"]["url"]

    def test_file_is_required(self, call):
        status, body = call()

        assert status == 400
        assert body["message"] == "Query parameters son requeridos"

    def test_disallowed_extension(self, call):
        status, body = call(query={"file": "payload.svg"})

        assert status == 400
        assert body["data"]["errors"][0]["field"] == "file"

    def test_unauthenticated(self, call):
        status, _ = call(query={"file": "phone.png"}, token=None)

        assert status == 401

    def test_only_get_is_routed(self, call):
        status, body = call(method="POST", query={"file": "phone.png"})

        assert status == 404
        assert body["data"]["availableRoutes"] == ["GET /image?file={nombre} - Generar URL firmada de subida"]
