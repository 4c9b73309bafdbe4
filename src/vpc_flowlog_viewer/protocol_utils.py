"""Protocol number to name mapping utilities."""

from .config import PROTOCOL_NAMES


def get_protocol_name(protocol_number: str) -> str:
    """Convert protocol number to the name shown in output, or pass it through."""
    return PROTOCOL_NAMES.get(str(protocol_number), str(protocol_number))
