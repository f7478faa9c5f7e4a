"""Core package exposing shared configuration helpers."""

from .config import JudgeConfig, get_settings

__all__ = ["JudgeConfig", "get_settings"]
