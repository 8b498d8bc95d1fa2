from __future__ import annotations

import asyncio

import uvicorn

from .adapters.base import LoggingNotifier, NotificationSink
from .adapters.discord import DiscordNotifier
from .api import create_app, header_identity_resolver
from .config import Settings, load_settings
from .core.engine import LifecycleEngine
from .core.storage import (
    ApplicationRepository,
    InMemoryApplicationStore,
    JSONApplicationStore,
)
from .logging_config import setup_logging


def build_store(settings: Settings) -> ApplicationRepository:
    if settings.data_path:
        return JSONApplicationStore(settings.data_path)
    return InMemoryApplicationStore()


def build_notifier(settings: Settings) -> NotificationSink:
    if not settings.token:
        return LoggingNotifier()
    return DiscordNotifier(
        settings.token,
        application_channel_id=settings.application_channel_id,
        log_channel_id=settings.log_channel_id,
        admin_role_id=settings.admin_role_id,
        reapply_after_hours=settings.reapply_after_hours,
    )


def build_engine(settings: Settings) -> LifecycleEngine:
    return LifecycleEngine(build_store(settings), build_notifier(settings))


def main() -> int:
    settings = load_settings()
    log = setup_logging(settings.log_level)
    engine = build_engine(settings)
    app = create_app(engine, header_identity_resolver(settings.identity_token))
    server = uvicorn.Server(
        uvicorn.Config(app, host=settings.api_host, port=settings.api_port, log_config=None)
    )

    bot = None
    if settings.token:
        from .bot import WhitelistBot
        from .commands.register import register_commands

        bot = WhitelistBot(engine, settings)
        register_commands(bot, engine, settings)
    else:
        log.warning(
            "DISCORD_BOT_TOKEN is not set. Bot functionality will be disabled."
        )

    async def runner() -> int:
        try:
            if bot is None:
                await server.serve()
            else:
                async with bot:
                    await asyncio.gather(server.serve(), bot.start(settings.token))
        finally:
            if isinstance(engine.notifier, DiscordNotifier):
                await engine.notifier.close()
        return 0

    try:
        return asyncio.run(runner())
    except KeyboardInterrupt:
        log.info("Shutting down...")
        return 0


if __name__ == "__main__":
    raise SystemExit(main())
