# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Account storage port and an in-memory adapter."""

from __future__ import annotations

import itertools
from typing import Protocol, runtime_checkable

from socialmesh.auth.models import UserAccount
from socialmesh.kernel.exceptions import ConflictException


@runtime_checkable
class UserRepository(Protocol):
    """Port for account persistence.  Emails are stored lower-cased."""

    def find_by_email(self, email: str) -> UserAccount | None: ...

    def save(self, account: UserAccount) -> UserAccount: ...

    def next_id(self) -> int: ...


class InMemoryUserRepository:
    """Process-local account store, suitable for development and tests."""

    def __init__(self) -> None:
        self._accounts: dict[str, UserAccount] = {}
        self._ids = itertools.count(1)

    def find_by_email(self, email: str) -> UserAccount | None:
        return self._accounts.get(email.lower())

    def save(self, account: UserAccount) -> UserAccount:
        key = account.email.lower()
        if key in self._accounts:
            raise ConflictException(f"Email {account.email} is already used with another account", code="EMAIL_TAKEN")
        self._accounts[key] = account
        return account

    def next_id(self) -> int:
        return next(self._ids)

    def __len__(self) -> int:
        return len(self._accounts)
