"""Process-wide lifecycle object tying the session, provider and triggers together."""

from typing import Optional

from .clipboard import Clipboard, SystemClipboard
from .config import BrokerConfig, PluginSettings, save_settings
from .logging import get_logger
from .notifications import Notifier
from .vault.fetcher import CredentialFetcher
from .vault.models import Failure, Property, RetrievalResult
from .vault.providers import VaultProvider, get_provider
from .vault.session import VaultSession
from .vault.triggers import TriggerBoard

logger = get_logger("main")


class Broker:
    """Owns the single VaultSession for this process."""

    def __init__(
        self,
        config: BrokerConfig,
        session: Optional[VaultSession] = None,
        clipboard: Optional[Clipboard] = None,
        fetcher: Optional[CredentialFetcher] = None,
    ):
        self.config = config
        self.session = session or VaultSession()
        self.clipboard = clipboard or SystemClipboard()
        self.fetcher = fetcher or CredentialFetcher()
        self.notifier = Notifier()
        self.triggers = TriggerBoard()
        self.provider: VaultProvider = get_provider(
            config.password_manager, config, self.session, self.fetcher
        )

    async def unlock(self, master_password: str) -> Optional[Failure]:
        return await self.provider.unlock(master_password)

    def unlock_with_token(self, token: str) -> None:
        self.provider.unlock_with_token(token)

    def lock(self) -> None:
        self.provider.lock()

    async def copy(self, source: str, property: Property | str) -> Optional[RetrievalResult]:
        """Fire the trigger for (source, property). None means it was already in flight."""
        trigger = self.triggers.get(source, property)
        return await trigger.fire(self.provider, self.clipboard, self.notifier)

    def update_settings(self, settings: PluginSettings) -> None:
        """Validate and persist new settings, then adopt them."""
        provider = get_provider(settings.password_manager, self.config, self.session, self.fetcher)
        save_settings(settings, self.config.settings_path)
        self.config.apply(settings)
        self.provider = provider

    def shutdown(self) -> None:
        self.lock()
