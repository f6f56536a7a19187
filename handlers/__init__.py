"""
handlers/ - Presentation Layer
================================
Telegram command handlers. Each one parses the command arguments, calls a
service with the resolved SessionUser, and replies. Structured failures are
turned into chat messages by ``replies``; nothing else happens here.
"""
