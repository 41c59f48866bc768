from aiogram import Router

from .habits import router as habits_router


def setup_routers() -> Router:
    router = Router()
    router.include_router(habits_router)
    return router
