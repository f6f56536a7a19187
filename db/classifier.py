"""
db/classifier.py
----------------
Decides whether a failed database operation means "the backend is
unreachable" (worth one retry on the fallback) or "the backend rejected the
work" (must propagate).

A reachable but misconfigured primary (bad password, missing database) is
deliberately FATAL so the mistake is not hidden behind the fallback.
"""

import errno
import re
import socket
from enum import Enum
from typing import Optional

import psycopg2

from errors import BackendUnavailable

_NETWORK_ERRNOS = frozenset({
    errno.ECONNREFUSED,
    errno.ETIMEDOUT,
    errno.EHOSTUNREACH,
    errno.ENETUNREACH,
    errno.ECONNRESET,
    errno.EPIPE,
})

_NAME_RESOLUTION_ERRNOS = frozenset({
    socket.EAI_NONAME,
    socket.EAI_AGAIN,
})

# SQLSTATE class 08: connection exception
_CONNECTION_EXCEPTION_RE = re.compile(r"^08\d{3}$")

# Severity prefix of a message sent by the server itself
_SERVER_REPLY_RE = re.compile(r"\b(?:FATAL|PANIC|ERROR):\s")

# libpq wording for the same OS/network failures; psycopg2 gives them no SQLSTATE
_UNREACHABLE_MESSAGES = (
    "connection refused",
    "could not connect to server",
    "timeout expired",
    "timed out",
    "could not translate host name",
    "name or service not known",
    "temporary failure in name resolution",
    "no route to host",
    "network is unreachable",
    "server closed the connection unexpectedly",
    "connection reset",
    "broken pipe",
    "connection already closed",
    "ssl syscall error",
    "could not receive data from server",
    "could not send data to server",
)


class Classification(str, Enum):
    RETRYABLE = "retryable"
    FATAL = "fatal"


def sqlstate_of(error: BaseException) -> Optional[str]:
    """SQLSTATE carried by a driver error, if any."""
    return getattr(error, "pgcode", None) or getattr(error, "sqlstate", None)


def is_unreachable_message(error: BaseException) -> bool:
    """
    True if a libpq error message describes a server that was never reached.

    libpq reports one line per address it tried. A severity-tagged reply on
    any line (``FATAL:  password authentication failed``) means some server
    answered, so the failure is not an outage even if other addresses refused.
    """
    message = str(error)
    if _SERVER_REPLY_RE.search(message):
        return False
    lowered = message.lower()
    return any(fragment in lowered for fragment in _UNREACHABLE_MESSAGES)


def classify(error: BaseException) -> Classification:
    """
    Classify a failure.

    Rules, in order:
        1. OS/network failures -> RETRYABLE.
        2. SQLSTATE class 08 (connection exception) -> RETRYABLE.
        3. Anything else -> FATAL.
    """
    if isinstance(error, BackendUnavailable):
        return Classification.RETRYABLE

    if isinstance(error, socket.gaierror) and error.errno in _NAME_RESOLUTION_ERRNOS:
        return Classification.RETRYABLE
    if isinstance(error, OSError) and error.errno in _NETWORK_ERRNOS:
        return Classification.RETRYABLE

    code = sqlstate_of(error)
    if isinstance(code, str) and _CONNECTION_EXCEPTION_RE.match(code):
        return Classification.RETRYABLE

    if (
        code is None
        and isinstance(error, (psycopg2.OperationalError, psycopg2.InterfaceError))
        and is_unreachable_message(error)
    ):
        return Classification.RETRYABLE

    return Classification.FATAL
