"""
main.py
-------
Entry point for the FIR Records Telegram bot.

Responsibilities:
    - Initialize the primary/fallback database pools and schema.
    - Configure and start the Telegram bot with all handlers.
    - Close the pools on shutdown.
"""

from telegram import BotCommand
from telegram.ext import Application, CommandHandler

from config import TELEGRAM_BOT_TOKEN
from db.connection import close_pool, get_database, init_pool
from db.init_db import create_tables
from handlers.case_handler import case_command, cases_command, newfir_command
from handlers.export_handler import export_csv_command, export_excel_command
from handlers.officer_handler import addofficer_command, officers_command
from handlers.person_handler import addperson_command, persons_command
from handlers.start_handler import health_command, help_command, myid_command, start_command
from utils.logger import get_logger

logger = get_logger(__name__)


async def set_bot_commands(application: Application) -> None:
    """Register bot commands menu in Telegram on startup."""
    commands = [
        BotCommand("start", "🚀 Start"),
        BotCommand("help", "📖 Help"),
        BotCommand("cases", "📁 Latest cases"),
        BotCommand("case", "🔎 Case details"),
        BotCommand("newfir", "📝 Register an FIR"),
        BotCommand("persons", "👤 Search persons"),
        BotCommand("addperson", "➕ Add a person"),
        BotCommand("officers", "👮 Officers"),
        BotCommand("addofficer", "➕ Add an officer"),
        BotCommand("export_csv", "📄 Export CSV"),
        BotCommand("export_excel", "📊 Export Excel"),
        BotCommand("health", "🩺 Database status"),
        BotCommand("myid", "🆔 Your Telegram ID"),
    ]
    await application.bot.set_my_commands(commands)
    logger.info("Bot commands menu registered successfully.")


def main() -> None:
    """Initialize and run the bot."""

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    init_pool()
    if not get_database().test_connection():
        logger.warning("No database is reachable yet; commands will fail until one is.")
    else:
        create_tables()

    # ── 2. Build the Telegram application ─────────────────
    logger.info("Starting Telegram bot...")
    app = Application.builder().token(TELEGRAM_BOT_TOKEN).post_init(set_bot_commands).build()

    # ── 3. Register command handlers ──────────────────────
    app.add_handler(CommandHandler("start", start_command))
    app.add_handler(CommandHandler("help", help_command))
    app.add_handler(CommandHandler("myid", myid_command))
    app.add_handler(CommandHandler("health", health_command))
    app.add_handler(CommandHandler("cases", cases_command))
    app.add_handler(CommandHandler("case", case_command))
    app.add_handler(CommandHandler("newfir", newfir_command))
    app.add_handler(CommandHandler("persons", persons_command))
    app.add_handler(CommandHandler("addperson", addperson_command))
    app.add_handler(CommandHandler("officers", officers_command))
    app.add_handler(CommandHandler("addofficer", addofficer_command))
    app.add_handler(CommandHandler("export_csv", export_csv_command))
    app.add_handler(CommandHandler("export_excel", export_excel_command))

    # ── 4. Start polling ──────────────────────────────────
    logger.info("🚀 FIR Records bot is running! Press Ctrl+C to stop.")
    app.run_polling(drop_pending_updates=True, allowed_updates=["message"])

    # ── 5. Cleanup on shutdown ────────────────────────────
    close_pool()
    logger.info("FIR Records bot stopped.")


if __name__ == "__main__":
    main()
