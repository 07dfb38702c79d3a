"""Shared pytest fixtures and helpers for catalog tests."""

from .core import *  # noqa: F401,F403
