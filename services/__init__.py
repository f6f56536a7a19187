"""
services/ - Business Logic Layer
=================================
Case registration, FIR number allocation, person records and exports.
Every service checks the caller's capability before reaching a repository.
"""
