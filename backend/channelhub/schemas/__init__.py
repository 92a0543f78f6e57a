"""Convenience exports for application schemas."""

from __future__ import annotations

from .account import AccountSchema, AccountUpdateSchema, RegisterSchema
from .auth import (
    ChangePasswordSchema,
    LoginResponseSchema,
    LoginSchema,
    RefreshSchema,
    TokenPairSchema,
)
from .channel import ChannelProfileSchema, VideoOwnerSchema, WatchedVideoSchema
from .common import InputSchema, envelope

__all__ = [
    "AccountSchema",
    "AccountUpdateSchema",
    "ChangePasswordSchema",
    "ChannelProfileSchema",
    "InputSchema",
    "LoginResponseSchema",
    "LoginSchema",
    "RefreshSchema",
    "RegisterSchema",
    "TokenPairSchema",
    "VideoOwnerSchema",
    "WatchedVideoSchema",
    "envelope",
]
