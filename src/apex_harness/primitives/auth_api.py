"""Test-account provisioning against the app's auth API."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

import httpx


class AuthApiError(RuntimeError):
    """Signup request was rejected by the backend."""
    pass


@dataclass
class SignupAccount:
    email: str
    password: str
    handle: str

    @classmethod
    def generate(cls, password: str = "TestPassword123!") -> "SignupAccount":
        stamp = int(time.time() * 1000)
        return cls(
            email=f"harness-test-{stamp}@example.com",
            password=password,
            handle=f"harnesstest{stamp}",
        )

    def to_dict(self) -> dict[str, Any]:
        return {"email": self.email, "password": self.password, "handle": self.handle}


class AuthApiClient:
    """Creates throwaway accounts via ``POST /api/auth/signup``."""

    def __init__(
        self,
        backend_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.backend_url = backend_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def create_test_account(self, account: SignupAccount | None = None) -> SignupAccount:
        """
        Register a fresh account.

        Raises:
            AuthApiError: If the backend answers with a non-2xx status
        """
        account = account or SignupAccount.generate()
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(
                f"{self.backend_url}/api/auth/signup",
                json=account.to_dict(),
            )
        if not response.is_success:
            raise AuthApiError(response.text or "Failed to create test user")
        return account
