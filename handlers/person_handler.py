"""
handlers/person_handler.py
---------------------------
Handles person search and registration commands.
Delegates all logic to PersonService.
"""

from telegram import Update
from telegram.ext import ContextTypes

from errors import RecordsError
from handlers.replies import reply_failure
from models.person import Person
from models.user import SessionUser
from security.auth import authorized_only
from services.person_service import PersonService

person_service = PersonService()


@authorized_only
async def persons_command(update: Update, context: ContextTypes.DEFAULT_TYPE, user: SessionUser) -> None:
    """Handle /persons [term] - search persons."""
    term = " ".join(context.args or [])
    try:
        persons = person_service.search(user, term)
    except RecordsError as e:
        await reply_failure(update, e)
        return

    if not persons:
        await update.message.reply_text("📭 No persons found.")
        return
    await update.message.reply_text("\n".join(f"• {p}" for p in persons))


@authorized_only
async def addperson_command(update: Update, context: ContextTypes.DEFAULT_TYPE, user: SessionUser) -> None:
    """
    Handle /addperson <first> <last> [national ID].
    """
    args = context.args or []
    if len(args) < 2:
        await update.message.reply_text("⚠️ Usage: /addperson <first> <last> [national ID]")
        return

    person = Person(
        first_name=args[0],
        last_name=args[1],
        national_id=args[2] if len(args) > 2 else None,
    )
    try:
        person = person_service.add_person(user, person)
    except RecordsError as e:
        await reply_failure(update, e)
        return

    await update.message.reply_text(f"✅ Person added: {person}")
