"""
handlers/case_handler.py
-------------------------
Handles case (FIR) commands.
Delegates all logic to CaseService.
"""

from datetime import date

from telegram import Update
from telegram.ext import ContextTypes

from errors import RecordsError
from handlers.replies import reply_failure
from models.user import SessionUser
from security.auth import authorized_only
from services.case_service import CaseService
case_service = CaseService()

NEWFIR_USAGE = (
    "⚠️ Usage: /newfir crime type | location | YYYY-MM-DD | description [| section]\n"
    "Example: /newfir Theft | New Road | 2026-03-14 | Motorbike stolen from parking"
)


@authorized_only
async def cases_command(update: Update, context: ContextTypes.DEFAULT_TYPE, user: SessionUser) -> None:
    """
    Handle /cases [fir_no] - list latest cases, or filter by exact FIR number.
    """
    fir_no = context.args[0] if context.args else None
    try:
        cases = case_service.list_cases(user, fir_no=fir_no)
    except RecordsError as e:
        await reply_failure(update, e)
        return

    if not cases:
        await update.message.reply_text("📭 No cases found.")
        return
    lines = ["📁 Cases\n"] + [f"• {c}" for c in cases]
    await update.message.reply_text("\n".join(lines))


@authorized_only
async def case_command(update: Update, context: ContextTypes.DEFAULT_TYPE, user: SessionUser) -> None:
    """Handle /case <fir_no> - show one case."""
    if not context.args:
        await update.message.reply_text("⚠️ Usage: /case <FIR no>\nExample: /case KTM/2026/0001")
        return

    try:
        case = case_service.get_case(user, context.args[0])
    except RecordsError as e:
        await reply_failure(update, e)
        return

    if case is None:
        await update.message.reply_text("📭 Case not found.")
        return

    await update.message.reply_text(
        f"📁 {case.fir_no}\n"
        f"Station: {case.station_name or '-'}\n"
        f"Crime: {case.crime_type}"
        + (f" ({case.crime_section})" if case.crime_section else "")
        + f"\nStatus: {case.status} | Priority: {case.priority}\n"
        f"Incident: {case.incident_date or '-'} at {case.incident_location or '-'}\n"
        f"Registered by: {case.registered_by_name or '-'}\n\n"
        f"{case.summary or ''}"
    )


@authorized_only
async def newfir_command(update: Update, context: ContextTypes.DEFAULT_TYPE, user: SessionUser) -> None:
    """
    Handle /newfir - register a case and allocate its FIR number.

    Format: /newfir crime type | location | YYYY-MM-DD | description [| section]
    """
    raw = " ".join(context.args or [])
    parts = [p.strip() for p in raw.split("|")]
    if len(parts) < 4 or not all(parts[:4]):
        await update.message.reply_text(NEWFIR_USAGE)
        return

    try:
        incident_date = date.fromisoformat(parts[2])
    except ValueError:
        await update.message.reply_text("⚠️ Incident date must be YYYY-MM-DD.")
        return

    data = {
        "crime_type": parts[0],
        "incident_location": parts[1],
        "incident_date": incident_date,
        "incident_description": parts[3],
        "crime_section": parts[4] if len(parts) > 4 else None,
    }

    try:
        case = case_service.register_case(user, data)
    except RecordsError as e:
        await reply_failure(update, e)
        return

    await update.message.reply_text(f"✅ FIR registered successfully: {case.fir_no}")
