"""
security/auth.py
-----------------
Authentication middleware for the Telegram bot.
Resolves the caller to a registered, active application user and blocks
everyone else.
"""

from functools import wraps
from typing import Callable

from telegram import Update
from telegram.ext import ContextTypes

from errors import RecordsError
from handlers.replies import reply_failure
from repositories.user_repo import UserRepository
from utils.logger import get_logger

logger = get_logger(__name__)
user_repo = UserRepository()


def authorized_only(func: Callable):
    """
    Decorator that restricts a handler to registered users.

    Usage:
        @authorized_only
        async def my_handler(update, context, user):
            ...

    Behavior:
        - The Telegram ID is looked up in the users table.
        - Unknown or inactive accounts are refused and the attempt is logged.
        - The resolved SessionUser is passed to the handler as ``user``.
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        tg_user = update.effective_user
        if not tg_user:
            return

        try:
            user = user_repo.get_by_telegram_id(tg_user.id)
        except RecordsError as e:
            await reply_failure(update, e)
            return

        if user is None:
            logger.warning(
                f"Unauthorized access attempt: telegram_id={tg_user.id}, "
                f"username={tg_user.username}"
            )
            await update.message.reply_text(
                "⛔ Your Telegram account is not linked to an active user. "
                "Send /myid to an administrator to get access."
            )
            return

        return await func(update, context, user, *args, **kwargs)

    return wrapper
