"""
db/ - Database Layer
====================
Owns the primary and fallback PostgreSQL pools, failover routing, placeholder
normalization and error classification. Every other layer reaches the
database through ``db.connection`` only.
"""
