"""
Password-manager providers.

Each provider kind implements the same capability interface (unlock, lock,
fetch) on top of a VaultSession and a CredentialFetcher. Bitwarden is the
only kind today; a new kind is a new enum member plus a VaultProvider.
"""

import os
from enum import Enum
from typing import Optional, Protocol

from ..config import BrokerConfig
from ..logging import forget_secret, get_logger, register_secret
from .fetcher import CredentialFetcher, run_cli
from .models import Failure, Property, RetrievalRequest, RetrievalResult
from .session import VaultSession

logger = get_logger("vault")

PASSWORD_ENV_VAR = "PASSBRIDGE_BW_PASSWORD"


class PasswordManager(str, Enum):
    BITWARDEN = "Bitwarden"


class VaultProvider(Protocol):
    kind: PasswordManager

    async def unlock(self, master_password: str) -> Optional[Failure]: ...

    def unlock_with_token(self, token: str) -> None: ...

    def lock(self) -> None: ...

    async def fetch(self, property: Property, source: str) -> RetrievalResult: ...


class BitwardenProvider:
    """Talks to the `bw` CLI."""

    kind = PasswordManager.BITWARDEN

    def __init__(
        self,
        config: BrokerConfig,
        session: VaultSession,
        fetcher: Optional[CredentialFetcher] = None,
    ):
        self.config = config
        self.session = session
        self.fetcher = fetcher or CredentialFetcher()

    async def unlock(self, master_password: str) -> Optional[Failure]:
        """
        Exchange the master password for a session token via `bw unlock`.

        The password travels through the child's environment, not its argv.
        On failure the current session is left as it was.

        Returns:
            None on success, otherwise the classified Failure
        """
        env = dict(os.environ)
        env[PASSWORD_ENV_VAR] = master_password
        result = await run_cli(
            [self.config.binary_path, "unlock", "--raw", "--passwordenv", PASSWORD_ENV_VAR],
            self.config.exec_timeout_ms,
            env=env,
        )
        if isinstance(result, Failure):
            logger.warning(f"Unlock failed: {result.reason}")
            return result

        self.unlock_with_token(result.value.strip())
        return None

    def unlock_with_token(self, token: str) -> None:
        """Store a session token obtained outside passbridge."""
        forget_secret(self.session.current_token())
        register_secret(token)
        self.session.unlock(token)
        if self.session.is_unlocked:
            logger.info("Vault unlocked (session token held in memory)")
        else:
            logger.warning("Unlock called with an empty token; session stays locked")

    def lock(self) -> None:
        forget_secret(self.session.current_token())
        self.session.lock()
        logger.info("Vault locked (session token cleared from memory)")

    async def fetch(self, property: Property, source: str) -> RetrievalResult:
        request = RetrievalRequest(
            property=Property.parse(property),
            source=source,
            session_token=self.session.current_token(),
            binary_path=self.config.binary_path,
            timeout_ms=self.config.exec_timeout_ms,
        )
        return await self.fetcher.fetch(request)


_PROVIDERS = {
    PasswordManager.BITWARDEN: BitwardenProvider,
}


def get_provider(
    kind: str,
    config: BrokerConfig,
    session: VaultSession,
    fetcher: Optional[CredentialFetcher] = None,
) -> VaultProvider:
    """Build the provider for a PasswordManager name."""
    try:
        manager = PasswordManager(kind)
    except ValueError:
        raise ValueError(f"Unsupported password manager: {kind!r}") from None
    return _PROVIDERS[manager](config, session, fetcher)
