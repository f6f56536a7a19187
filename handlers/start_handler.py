"""
handlers/start_handler.py
--------------------------
Handles /start, /help, /myid and /health commands.
"""

from telegram import Update
from telegram.ext import ContextTypes

from db.connection import get_database
from errors import RecordsError
from handlers.replies import reply_failure
from models.user import SessionUser
from repositories.user_repo import UserRepository
from security.auth import authorized_only
from utils.logger import get_logger

logger = get_logger(__name__)
user_repo = UserRepository()

HELP_TEXT = """
🚓 *FIR Records*

*Cases:*
/cases - latest cases at your station
/cases <FIR no> - find a case by FIR number
/case <FIR no> - case details
/newfir crime | location | YYYY-MM-DD | description [| section]

*Persons:*
/persons [name or ID] - search persons
/addperson <first> <last> [national ID]

*Officers:*
/officers [name or badge] - officer roster
/addofficer badge | first | last | rank [| station ID]

*Exports:*
/export\\_csv [year] - case register as CSV
/export\\_excel [year] - case register as Excel

*Other:*
/health - database status
/myid - your Telegram ID
"""


@authorized_only
async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE, user: SessionUser) -> None:
    """Handle /start command - record the login and show a welcome message."""
    try:
        user_repo.record_login(user.id)
    except RecordsError as e:
        await reply_failure(update, e)
        return
    logger.info(f"User {user.id} ({user.username}) started the bot.")
    await update.message.reply_text(
        f"Welcome {user.username} ({user.role.value}).\n"
        f"Type /help to see the available commands."
    )


@authorized_only
async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE, user: SessionUser) -> None:
    """Handle /help command - show all available commands."""
    await update.message.reply_text(HELP_TEXT, parse_mode="Markdown")


async def myid_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /myid command - show the caller's Telegram ID so an admin can link it."""
    tg_user = update.effective_user
    await update.message.reply_text(
        f"🆔 Your Telegram ID: `{tg_user.id}`\n"
        f"Ask an administrator to link it to your user account.",
        parse_mode="Markdown",
    )


@authorized_only
async def health_command(update: Update, context: ContextTypes.DEFAULT_TYPE, user: SessionUser) -> None:
    """
    Handle /health command - check primary then fallback database.

    Open to every registered user: it reads no records and is not a gated action.
    """
    db = get_database()
    try:
        healthy = db.test_connection()
    except RecordsError as e:
        await reply_failure(update, e)
        return
    mode = db.router.mode.value.replace("_", " ")
    status = "✅ Database reachable" if healthy else "❌ Database unreachable"
    await update.message.reply_text(f"{status}\nMode: {mode}")
