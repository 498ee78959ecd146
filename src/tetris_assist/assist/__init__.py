"""Placement assistance backed by an optional remote model."""

from .coordinator import AssistCoordinator, resolve_choice
from .remote import (
    ChatCompletionSuggester,
    RemoteChoice,
    RemoteConfig,
    RemoteSuggester,
    build_prompt,
    parse_choice,
)

__all__ = [
    "AssistCoordinator",
    "resolve_choice",
    "ChatCompletionSuggester",
    "RemoteChoice",
    "RemoteConfig",
    "RemoteSuggester",
    "build_prompt",
    "parse_choice",
]
