"""Beacon node event stream subscription."""

from .listener import PayloadAttributesListener, PAYLOAD_ATTRIBUTES_TOPIC

__all__ = [
    "PayloadAttributesListener",
    "PAYLOAD_ATTRIBUTES_TOPIC",
]
