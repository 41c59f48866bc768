from __future__ import annotations

import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties

from app.config import settings
from app.handlers import setup_routers
from app.logging_config import setup_logging
from app.middlewares import OwnerOnlyMiddleware
from app.schemas.habit import Habit
from app.services.habit_store import HabitStore
from app.services.reminders import reminder_text
from app.services.storage import get_storage
from app.utils.scheduler import HabitReminderScheduler
from app.utils.timezone_utils import today_source


async def main() -> None:
    logger = setup_logging()
    logger.info("Starting Habit Tracker bot")

    if not settings.BOT_TOKEN:
        raise RuntimeError("BOT_TOKEN is not set. Put it into the environment or .env file.")

    store = HabitStore.open(get_storage(settings), today=today_source(settings.DEFAULT_TIMEZONE))

    bot = Bot(token=settings.BOT_TOKEN, default=DefaultBotProperties(parse_mode="HTML"))
    dp = Dispatcher()
    dp["store"] = store
    owner_only = OwnerOnlyMiddleware(settings.OWNER_CHAT_ID)
    dp.message.middleware(owner_only)
    dp.callback_query.middleware(owner_only)
    dp.include_router(setup_routers())

    scheduler = None
    if settings.OWNER_CHAT_ID is not None:
        owner_chat_id = settings.OWNER_CHAT_ID

        async def notify(habit: Habit) -> None:
            await bot.send_message(owner_chat_id, reminder_text(habit))

        scheduler = HabitReminderScheduler(store, notify, settings.DEFAULT_TIMEZONE)
        scheduler.start()
    else:
        logger.info("OWNER_CHAT_ID is not set, reminders are disabled")

    try:
        await dp.start_polling(bot)
    finally:
        if scheduler is not None:
            scheduler.shutdown()
        await bot.session.close()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("Bot stopped")
