"""Adapters from host toolkits' key events to engine key events."""

from .textual_keys import key_event_from_textual

__all__ = ["key_event_from_textual"]
