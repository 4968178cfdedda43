"""
UI Package for GPT Chat

This package provides the terminal user interface for the chat client
using the Textual framework.
"""

from .app import ChatApp, RequesterMessage

__all__ = ["ChatApp", "RequesterMessage"]
