"""Counting pass, loading pass and the session that drives them."""

from .loader import count_messages, load_messages, summarize_counts
from .session import DecodeSession, decode_messages

__all__ = [
    'count_messages',
    'load_messages',
    'summarize_counts',
    'DecodeSession',
    'decode_messages',
]
