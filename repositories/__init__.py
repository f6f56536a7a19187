"""
repositories/ - Data Access Layer
==================================
Each repository owns the SQL for one records table and maps rows to domain
models. Queries are written with ``?`` placeholders and always go through the
database facade, never a raw connection.
"""
