"""Authentication schemes attachable to a request.

New schemes only need an `auth_headers()` method; the dispatcher and the
transport never look inside a credential.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@runtime_checkable
class Credentials(Protocol):
    def auth_headers(self) -> dict[str, str]:
        ...


@dataclass(frozen=True)
class BasicAuthCredentials:
    username: str
    password: str = field(repr=False)

    def auth_headers(self) -> dict[str, str]:
        token = base64.b64encode(f"{self.username}:{self.password}".encode("utf-8")).decode("ascii")
        return {"Authorization": f"Basic {token}"}


@dataclass(frozen=True)
class BearerTokenCredentials:
    token: str = field(repr=False)

    def auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}
