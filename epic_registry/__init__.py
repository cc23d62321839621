"""
Epic Registry

Data-access layer for Epic entities with audit logging of mutations.
"""

__version__ = "0.1.0"
