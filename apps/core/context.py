"""
Explicit per-submission context.

Every fulfillment operation receives a ShopContext instead of reaching for a
shared mutable store, so two terminals (or two tests) never share state.
"""

from dataclasses import dataclass
from typing import Optional

from apps.core.models import Shop


@dataclass
class ShopContext:
    """
    Shop, terminal and collaborators for one order submission.

    Attributes:
        shop: Shop the order belongs to
        terminal_id: Identifier of the submitting terminal
        catalog: MenuCatalog used to resolve recipes
        notifications: NotificationSink receiving user-visible outcomes
    """

    shop: Shop
    terminal_id: str = ""
    catalog: Optional[object] = None
    notifications: Optional[object] = None

    @classmethod
    def for_shop(cls, shop, terminal_id="", notifications=None):
        """Build a context that loads the shop's menu from the database."""
        from apps.menu.catalog import DatabaseMenuCatalog
        from apps.notifications.services import RecordingNotificationSink

        return cls(
            shop=shop,
            terminal_id=terminal_id,
            catalog=DatabaseMenuCatalog(shop),
            notifications=notifications or RecordingNotificationSink(),
        )
