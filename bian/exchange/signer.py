"""
HMAC-SHA256 request signing.
"""

import hashlib
import hmac
from typing import Any, Optional

from .encoder import canonical_query


class RequestSigner:
    """
    Signs canonical query strings with the account secret.

    Holds nothing but the key bytes, so one instance can be shared by any
    number of concurrent calls.
    """

    def __init__(self, secret_key: str):
        self._key = secret_key.encode("utf-8")

    def __repr__(self) -> str:
        return "RequestSigner(secret_key=***)"

    def signature(self, query: str) -> str:
        """
        Compute the lowercase hex HMAC-SHA256 digest of ``query``.

        Args:
            query: Canonical query string, exactly as it will be sent

        Returns:
            64-character hex digest
        """
        return hmac.new(self._key, query.encode("utf-8"), hashlib.sha256).hexdigest()

    def sign(self, query: str) -> str:
        """Append ``signature=<hex>`` to a canonical query string."""
        signature = self.signature(query)
        if query:
            return f"{query}&signature={signature}"
        return f"signature={signature}"

    def signed_query(self, params: Optional[Any]) -> str:
        """Encode ``params`` canonically and sign the result."""
        return self.sign(canonical_query(params))
