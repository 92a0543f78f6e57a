"""Service layer public API.

This package exposes the service entry points so that callers can import
from :mod:`channelhub.services` without knowing the internal structure.

Re-exports
----------
- Base primitives (from ``channelhub.services._shared.base``)
    * :class:`BaseService`

- Sessions (from ``channelhub.services.auth``)
    * :class:`SessionManager`
    * DTOs: :class:`LoginIn`, :class:`ChangePasswordIn`, :class:`TokenPairOut`,
      :class:`LoginOut`

- Accounts (from ``channelhub.services.accounts``)
    * :class:`AccountService`
    * DTOs: :class:`RegisterIn`, :class:`ProfileUpdateIn`, :class:`UploadedFile`,
      :class:`AccountOut`

- Channels (from ``channelhub.services.channels``)
    * :class:`ChannelService`
    * DTOs: :class:`ChannelProfileOut`, :class:`WatchedVideoOut`,
      :class:`VideoOwnerOut`
"""

from __future__ import annotations

from ._shared.base import BaseService
from .accounts.dto import AccountOut, ProfileUpdateIn, RegisterIn, UploadedFile
from .accounts.service import AccountService
from .auth.dto import ChangePasswordIn, LoginIn, LoginOut, TokenPairOut
from .auth.service import SessionManager
from .channels.dto import ChannelProfileOut, VideoOwnerOut, WatchedVideoOut
from .channels.service import ChannelService

__all__ = [
    # Base
    "BaseService",
    # Sessions
    "SessionManager",
    "LoginIn",
    "ChangePasswordIn",
    "TokenPairOut",
    "LoginOut",
    # Accounts
    "AccountService",
    "RegisterIn",
    "ProfileUpdateIn",
    "UploadedFile",
    "AccountOut",
    # Channels
    "ChannelService",
    "ChannelProfileOut",
    "WatchedVideoOut",
    "VideoOwnerOut",
]
