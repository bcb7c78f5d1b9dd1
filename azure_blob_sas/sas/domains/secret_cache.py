"""Session-lifetime cache of storage account keys."""
import base64
import binascii
import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)

# Storage account keys are 512-bit values
ACCOUNT_KEY_LENGTH = 64
INVALID_SECRET_MESSAGE = "Invalid secret"


def validate_account_key(value: Optional[str]) -> Optional[str]:
    """
    Validate a storage account key.

    Args:
        value: Text entered by the user

    Returns:
        None when value is base64 for exactly 64 bytes, otherwise an error message
    """
    if not value:
        return INVALID_SECRET_MESSAGE

    try:
        decoded = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        return INVALID_SECRET_MESSAGE

    if len(decoded) != ACCOUNT_KEY_LENGTH:
        return INVALID_SECRET_MESSAGE

    return None


class SecretCache:
    """
    Account name -> last entered account key.

    Lives as long as the session that owns it and is never written to disk.
    Keys are account names exactly as parsed from the URI.
    """

    def __init__(self):
        self._secrets: Dict[str, str] = {}

    def get(self, account_name: str) -> Optional[str]:
        return self._secrets.get(account_name)

    def remember(self, account_name: str, secret: str) -> None:
        self._secrets[account_name] = secret
        logger.debug(f"Cached secret for storage account '{account_name}'")

    def __contains__(self, account_name: str) -> bool:
        return account_name in self._secrets

    def __len__(self) -> int:
        return len(self._secrets)

    def __repr__(self) -> str:
        return f"SecretCache(accounts={sorted(self._secrets)})"
