"""
handlers/export_handler.py
---------------------------
Handles case register export commands (CSV, Excel).
Delegates to ExportService.
"""

from datetime import date

from telegram import Update
from telegram.ext import ContextTypes

from errors import RecordsError
from handlers.replies import reply_failure
from models.user import SessionUser
from services.export_service import ExportService
from security.auth import authorized_only
from utils.logger import get_logger

logger = get_logger(__name__)
export_service = ExportService()


def _year_arg(context: ContextTypes.DEFAULT_TYPE) -> int | None:
    if not context.args:
        return date.today().year
    try:
        return int(context.args[0])
    except ValueError:
        return None


@authorized_only
async def export_csv_command(update: Update, context: ContextTypes.DEFAULT_TYPE, user: SessionUser) -> None:
    """
    Handle /export_csv command - send this year's case register as CSV.
    Optional: /export_csv 2025 (for a past year).
    """
    year = _year_arg(context)
    if year is None:
        await update.message.reply_text("⚠️ Usage: /export_csv [year]\nExample: /export_csv 2025")
        return

    await update.message.reply_text("📄 Preparing CSV file...")

    try:
        buffer = export_service.export_year_csv(user, year)
    except RecordsError as e:
        logger.error(f"CSV export failed: {e}")
        await reply_failure(update, e)
        return

    await update.message.reply_document(
        document=buffer,
        filename=f"cases_{year}.csv",
        caption=f"📊 Case register {year} - CSV",
    )


@authorized_only
async def export_excel_command(update: Update, context: ContextTypes.DEFAULT_TYPE, user: SessionUser) -> None:
    """
    Handle /export_excel command - send this year's case register as Excel.
    Optional: /export_excel 2025 (for a past year).
    """
    year = _year_arg(context)
    if year is None:
        await update.message.reply_text("⚠️ Usage: /export_excel [year]\nExample: /export_excel 2025")
        return

    await update.message.reply_text("📊 Preparing Excel file...")

    try:
        buffer = export_service.export_year_excel(user, year)
    except RecordsError as e:
        logger.error(f"Excel export failed: {e}")
        await reply_failure(update, e)
        return

    await update.message.reply_document(
        document=buffer,
        filename=f"cases_{year}.xlsx",
        caption=f"📊 Case register {year} - Excel",
    )
