"""
Web Module - Black Box Interface

Purpose: Carry request, response and session data to the pipeline
Interface: MockWebContext, StarletteWebContext, action_to_response()
Hidden: Framework request objects, response buffering

Any object satisfying the WebContext protocol can replace these.
"""

from .mock import MockWebContext
from .fastapi_context import StarletteWebContext, action_to_response

__all__ = ["MockWebContext", "StarletteWebContext", "action_to_response"]
