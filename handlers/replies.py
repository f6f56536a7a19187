"""
handlers/replies.py
-------------------
Turns structured failures into user-facing replies. Raw driver errors never
reach the chat.
"""

from telegram import Update

from errors import RecordsError

_MESSAGES = {
    "forbidden": "⛔ Your role is not allowed to do that.",
    "backend_unavailable": "⚠️ The records database is unreachable right now. Please try again shortly.",
    "query_rejected": "❌ The request could not be completed.",
}


def failure_text(error: RecordsError) -> str:
    """Reply text for a failure, chosen by its kind."""
    result = error.to_result()
    return _MESSAGES.get(result["kind"], f"⚠️ {result['message']}")


async def reply_failure(update: Update, error: RecordsError) -> None:
    await update.message.reply_text(failure_text(error))
