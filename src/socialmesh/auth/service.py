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
"""Registration and sign-in."""

from __future__ import annotations

import structlog

from socialmesh.auth.models import AuthResponse, SigninRequest, SignupRequest, UserAccount
from socialmesh.auth.repository import UserRepository
from socialmesh.kernel.exceptions import BadCredentialsException, ConflictException, ResourceNotFoundException
from socialmesh.security.jwt import JwtProvider
from socialmesh.security.password import PasswordEncoder

logger = structlog.get_logger("socialmesh.auth")


class AuthService:
    """Creates accounts and exchanges credentials for bearer tokens.

    Args:
        repository: Account storage.
        password_encoder: Hashes passwords on sign-up and verifies them on sign-in.
        jwt_provider: Issues the bearer token returned by both operations.
    """

    def __init__(
        self,
        repository: UserRepository,
        password_encoder: PasswordEncoder,
        jwt_provider: JwtProvider,
    ) -> None:
        self._repository = repository
        self._password_encoder = password_encoder
        self._jwt_provider = jwt_provider
        # checked for unknown emails so both failure paths pay for one bcrypt verify
        self._unknown_account_hash = password_encoder.hash("unknown-account")

    def register(self, request: SignupRequest) -> AuthResponse:
        """Create an account and sign it in.

        Raises:
            ConflictException: If the email is already registered.
        """
        if self._repository.find_by_email(request.email) is not None:
            raise ConflictException(f"Email {request.email} is already used with another account", code="EMAIL_TAKEN")

        account = self._repository.save(
            UserAccount(
                id=self._repository.next_id(),
                first_name=request.first_name,
                last_name=request.last_name,
                email=request.email,
                password_hash=self._password_encoder.hash(request.password),
            )
        )
        logger.info("account_registered", account_id=account.id)
        token = self._jwt_provider.generate_token(account.email, account.authorities)
        return AuthResponse(token=token, message="Register success")

    def authenticate(self, request: SigninRequest) -> AuthResponse:
        """Verify credentials and issue a token.

        Unknown emails and wrong passwords fail the same way so the response
        does not reveal which accounts exist.

        Raises:
            BadCredentialsException: If the credentials do not match an account.
        """
        account = self._repository.find_by_email(request.email)
        password_hash = account.password_hash if account is not None else self._unknown_account_hash
        if not self._password_encoder.verify(request.password, password_hash) or account is None:
            logger.info("signin_failed")
            raise BadCredentialsException("Invalid username or password", code="BAD_CREDENTIALS")

        token = self._jwt_provider.generate_token(account.email, account.authorities)
        return AuthResponse(token=token, message="Login success")

    def current_account(self, email: str) -> UserAccount:
        """Look up the account behind an authenticated principal.

        Raises:
            ResourceNotFoundException: If the account no longer exists.
        """
        account = self._repository.find_by_email(email)
        if account is None:
            raise ResourceNotFoundException(f"No account for {email}", code="USER_NOT_FOUND")
        return account
