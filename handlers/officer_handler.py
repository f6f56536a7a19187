"""
handlers/officer_handler.py
----------------------------
Handles officer roster commands.
Delegates all logic to OfficerService.
"""

from telegram import Update
from telegram.ext import ContextTypes

from errors import RecordsError
from handlers.replies import reply_failure
from models.officer import Officer
from models.user import SessionUser
from security.auth import authorized_only
from services.officer_service import OfficerService

officer_service = OfficerService()

ADDOFFICER_USAGE = (
    "⚠️ Usage: /addofficer badge | first name | last name | rank [| station ID]\n"
    "Example: /addofficer NP-4411 | Ram | Karki | Inspector"
)


@authorized_only
async def officers_command(update: Update, context: ContextTypes.DEFAULT_TYPE, user: SessionUser) -> None:
    """Handle /officers [term] - list officers, optionally filtered by name, badge or station."""
    term = " ".join(context.args or [])
    try:
        officers = officer_service.list_officers(user, term)
    except RecordsError as e:
        await reply_failure(update, e)
        return

    if not officers:
        await update.message.reply_text("📭 No officers found.")
        return
    await update.message.reply_text("\n".join(f"• {o}" for o in officers))


@authorized_only
async def addofficer_command(update: Update, context: ContextTypes.DEFAULT_TYPE, user: SessionUser) -> None:
    """
    Handle /addofficer - register an officer.

    Format: /addofficer badge | first name | last name | rank [| station ID]
    """
    parts = [p.strip() for p in " ".join(context.args or []).split("|")]
    if len(parts) < 4 or not all(parts[:4]):
        await update.message.reply_text(ADDOFFICER_USAGE)
        return

    station_id = None
    if len(parts) > 4 and parts[4]:
        if not parts[4].isdigit():
            await update.message.reply_text("⚠️ Station ID must be a number.")
            return
        station_id = int(parts[4])

    officer = Officer(
        badge_number=parts[0],
        first_name=parts[1],
        last_name=parts[2],
        rank=parts[3],
        station_id=station_id,
    )
    try:
        officer = officer_service.add_officer(user, officer)
    except RecordsError as e:
        await reply_failure(update, e)
        return

    await update.message.reply_text(f"✅ Officer added: {officer}")
