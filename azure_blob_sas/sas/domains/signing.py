"""SAS generation through the Azure Storage SDK."""
import logging
from datetime import datetime
from urllib.parse import SplitResult, unquote, urlunsplit

from azure.storage.blob import BlobSasPermissions, generate_blob_sas

from .errors import SigningError

logger = logging.getLogger(__name__)


def generate_sas(
    account_name: str,
    account_key: str,
    container: str,
    blob: str,
    permission: BlobSasPermissions,
    start: datetime,
    expiry: datetime,
) -> str:
    """
    Sign a blob SAS with the storage account key.

    Args:
        account_name: Storage account name
        account_key: Base64 storage account key
        container: Container name
        blob: Blob name as it appears in the URL path (percent-encoded)
        permission: Operations granted by the token
        start: Start of the validity window
        expiry: End of the validity window

    Returns:
        SAS query string, without a leading '?'

    Raises:
        SigningError: If the SDK rejects the inputs (e.g. malformed key)
    """
    try:
        token = generate_blob_sas(
            account_name=account_name,
            container_name=container,
            blob_name=unquote(blob),
            account_key=account_key,
            permission=permission,
            start=start,
            expiry=expiry,
        )
    except Exception as e:
        raise SigningError(
            f"Failed to sign {account_name}/{container}/{blob}: {e}"
        ) from e

    logger.debug(f"Signed {account_name}/{container}/{blob} until {expiry.isoformat()}")
    return token


def build_signed_url(url: SplitResult, sas_token: str) -> str:
    """Rebuild url with its query replaced by the SAS token."""
    return urlunsplit((url.scheme, url.netloc, url.path, sas_token, url.fragment))
