"""
security/ - Access Control
===========================
Caller resolution for the bot and the static role/action capability gate.
"""
