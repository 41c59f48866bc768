from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from aiogram import BaseMiddleware
from aiogram.types import CallbackQuery, Message, TelegramObject


logger = logging.getLogger(__name__)


class OwnerOnlyMiddleware(BaseMiddleware):
    """Logs incoming messages/callbacks and drops those from any chat but the owner's."""

    def __init__(self, owner_chat_id: Optional[int] = None):
        self.owner_chat_id = owner_chat_id

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        chat_id: Optional[int] = None
        if isinstance(event, Message):
            chat_id = event.chat.id
            logger.debug("Message from chat %s: %s", chat_id, event.text)
        elif isinstance(event, CallbackQuery) and event.message is not None:
            chat_id = event.message.chat.id
            logger.debug("Callback from chat %s: %s", chat_id, event.data)

        if self.owner_chat_id is not None and chat_id != self.owner_chat_id:
            logger.info("Ignoring update from chat %s", chat_id)
            return None
        return await handler(event, data)
