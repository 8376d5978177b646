"""ID decoder."""

from dataclasses import dataclass
from typing import Any

from idx.identifier import ID


@dataclass
class IDComponents:
    """Decoded ID components."""

    raw_id: str
    components: dict[str, Any]

    def __getitem__(self, key: str) -> Any:
        """Get component by name."""
        return self.components[key]

    def get(self, key: str, default: Any = None) -> Any:
        """Get component with default."""
        return self.components.get(key, default)


class IDDecoder:
    """Split an ID into its timestamp and random parts."""

    def decode(self, value: ID | str) -> IDComponents:
        """Decode an ID.

        Args:
            value: ID or canonical text

        Returns:
            Decoded ID components

        Raises:
            InvalidFormatError: If text is not a valid ID

        Example:
            >>> IDDecoder().decode("01HAJ2Q3T69HJMMBDNAMVZ3FQB")["timestamp_ms"]
            1694971432774
        """
        id_ = value if isinstance(value, ID) else ID.from_string(value)
        raw = id_.to_bytes()

        return IDComponents(
            raw_id=str(id_),
            components={
                "timestamp_ms": id_.timestamp_ms,
                "datetime": id_.created_at.isoformat(),
                "randomness": raw[6:].hex(),
                "hex": raw.hex(),
            },
        )
