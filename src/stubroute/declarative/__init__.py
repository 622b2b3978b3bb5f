"""Declarative mock responses — one capability per ``@mock_response`` entry."""

from stubroute.declarative.config import MockResponseConfig, declared_responses, mock_response
from stubroute.declarative.element import DeclarativeCapability
from stubroute.declarative.kv_json import key_values_to_json

__all__ = [
    "DeclarativeCapability",
    "MockResponseConfig",
    "declared_responses",
    "key_values_to_json",
    "mock_response",
]
