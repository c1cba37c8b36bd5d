# azure_blob.py
"""
Azure Blob Storage helpers for uploaded documents (expense receipts).

The client is created on first use so the API starts without storage
credentials; only the upload routes need them.
"""
import logging
import os
import uuid

from azure.storage.blob import BlobServiceClient

logger = logging.getLogger(__name__)

account = os.getenv("AZURE_STORAGE_ACCOUNT")
key = os.getenv("AZURE_STORAGE_KEY")
EXPENSE_RECEIPTS_CONTAINER = os.getenv("EXPENSE_RECEIPTS_CONTAINER", "expense-receipts")

_blob_service = None


def _get_blob_service() -> BlobServiceClient:
     global _blob_service
     if _blob_service is None:
          if not account or not key:
               raise RuntimeError("AZURE_STORAGE_ACCOUNT and AZURE_STORAGE_KEY must be set")
          _blob_service = BlobServiceClient.from_connection_string(
               f"DefaultEndpointsProtocol=https;"
               f"AccountName={account};"
               f"AccountKey={key};"
               f"EndpointSuffix=core.windows.net"
          )
     return _blob_service


def upload_to_blob(file, container: str, prefix: str | int) -> str:
     """Upload an UploadFile under <prefix>/<uuid><ext> and return its URL."""
     ext = os.path.splitext(file.filename or "")[1]
     filename = f"{prefix}/{uuid.uuid4()}{ext}"
     blob_client = _get_blob_service().get_blob_client(container=container, blob=filename)
     blob_client.upload_blob(file.file, overwrite=True)
     logger.info("Uploaded %s to container %s", filename, container)
     return f"https://{account}.blob.core.windows.net/{container}/{filename}"


def delete_from_blob(blob_url: str):
     """
     Deletes a file from Azure Blob Storage using its full URL
     """
     path = blob_url.split(".blob.core.windows.net/", 1)[-1]
     container, _, blob_name = path.partition("/")
     blob_client = _get_blob_service().get_blob_client(
          container=container,
          blob=blob_name
     )
     blob_client.delete_blob()
