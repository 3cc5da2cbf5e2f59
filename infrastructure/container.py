"""
Dependency Injection Container
================================

Simple service locator for infrastructure adapters and domain services.
Services are built lazily on first use and cached until ``reset()``.

Usage:
    from infrastructure.container import container

    # In a view
    service = container.listing_service()

    # In a service
    notifier = container.notifier()
"""

import logging
from typing import Optional

from .events import EventBus, get_event_bus, reset_event_bus
from .notifications import InvalidationNotifier


logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Service container for infrastructure dependencies.

    Implements lazy initialization and caching of service instances.
    Singleton pattern.
    """

    _instance: Optional["ServiceContainer"] = None
    _initialized: bool = False

    def __new__(cls):
        """Ensure only one instance exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize container (only once)."""
        if not self._initialized:
            self._clear()
            self._initialized = True
            logger.info("Service container initialized")

    def _clear(self):
        self._notifier: Optional[InvalidationNotifier] = None

        # Domain Services
        self._listing_service = None
        self._favorite_service = None
        self._messaging_service = None
        self._user_admin_service = None

    def event_bus(self) -> EventBus:
        """Get the process-wide event bus ('redis' or 'memory' per settings)."""
        return get_event_bus()

    def notifier(self) -> InvalidationNotifier:
        """
        Get the invalidation notifier.

        Returns:
            InvalidationNotifier publishing on the configured event bus (cached)
        """
        if self._notifier is None:
            self._notifier = InvalidationNotifier(self.event_bus())
            logger.debug("Created InvalidationNotifier")
        return self._notifier

    def listing_service(self):
        """Get ListingService instance."""
        if self._listing_service is None:
            from marketplace.services import ListingService

            self._listing_service = ListingService(notifier=self.notifier())
            logger.debug("Created ListingService")
        return self._listing_service

    def favorite_service(self):
        """Get FavoriteService instance."""
        if self._favorite_service is None:
            from marketplace.services import FavoriteService

            self._favorite_service = FavoriteService(notifier=self.notifier())
            logger.debug("Created FavoriteService")
        return self._favorite_service

    def messaging_service(self):
        """Get MessagingService instance."""
        if self._messaging_service is None:
            from chat.domain.services import MessagingService

            self._messaging_service = MessagingService(notifier=self.notifier())
            logger.debug("Created MessagingService")
        return self._messaging_service

    def user_admin_service(self):
        """Get UserAdministrationService instance."""
        if self._user_admin_service is None:
            from authentication.domain.services import UserAdministrationService

            self._user_admin_service = UserAdministrationService()
            logger.debug("Created UserAdministrationService")
        return self._user_admin_service

    def reset(self):
        """
        Reset all cached service instances and the event bus.

        Useful for testing or when switching between environments.
        """
        self._clear()
        reset_event_bus()
        logger.info("Service container reset")


# Global singleton instance
container = ServiceContainer()

