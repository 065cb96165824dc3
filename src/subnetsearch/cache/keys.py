"""Cache key builders for consistent key formatting."""

import hashlib


class CacheKeys:
    """Cache key builders for consistent key formatting."""

    PREFIX = "subnetsearch"

    @classmethod
    def autocomplete_prefix(cls) -> str:
        """Common prefix of every autocomplete key."""
        return f"{cls.PREFIX}:autocomplete:"

    @classmethod
    def autocomplete(
        cls,
        query: str,
        size: int = 5,
        field: str | None = None,
    ) -> str:
        """Key for autocomplete suggestions."""
        # Hash the parameters for consistent key length.
        # Query kept verbatim: it is echoed in the cached payload.
        hash_input = f"{query}:{size}:{(field or '').upper()}"
        hash_value = hashlib.md5(hash_input.encode()).hexdigest()[:12]
        return f"{cls.autocomplete_prefix()}{hash_value}"
