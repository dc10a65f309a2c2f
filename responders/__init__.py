"""
Casual-chat responder.

This package turns free text into short human-sounding replies.
"""
from .chat import ChatResponder
from .matching import KeywordMatcher, ResponseCategory, match_trigger

__all__ = [
    "ChatResponder",
    "KeywordMatcher",
    "ResponseCategory",
    "match_trigger",
]
