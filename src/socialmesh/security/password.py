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
"""Password hashing for stored credentials: the encoder port and its bcrypt adapter."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import bcrypt as _bcrypt

# bcrypt ignores input past this many bytes
MAX_PASSWORD_BYTES = 72


@runtime_checkable
class PasswordEncoder(Protocol):
    """How account passwords are stored and checked; only the hash is ever persisted."""

    def hash(self, raw_password: str) -> str: ...

    def verify(self, raw_password: str, hashed_password: str) -> bool: ...


class BcryptPasswordEncoder:
    """PasswordEncoder adapter using bcrypt.

    Every call to :meth:`hash` draws a fresh salt, so hashing the same
    password twice yields different strings that both verify.

    Args:
        rounds: bcrypt cost factor, 4 to 31 (default: 10).
    """

    def __init__(self, rounds: int = 10) -> None:
        if not 4 <= rounds <= 31:
            raise ValueError(f"bcrypt rounds must be between 4 and 31, got {rounds}")
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, raw_password: str) -> str:
        salt = _bcrypt.gensalt(rounds=self._rounds)
        return _bcrypt.hashpw(_encode(raw_password), salt).decode("utf-8")

    def verify(self, raw_password: str, hashed_password: str) -> bool:
        """Verify a raw password against a bcrypt hash.

        Returns ``False`` for values that are not bcrypt hashes at all.
        """
        try:
            return _bcrypt.checkpw(_encode(raw_password), hashed_password.encode("utf-8"))
        except ValueError:
            return False


def _encode(raw_password: str) -> bytes:
    # bcrypt>=4.1 raises on inputs longer than 72 bytes instead of truncating
    return raw_password.encode("utf-8")[:MAX_PASSWORD_BYTES]
