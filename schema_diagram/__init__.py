"""
Schema Diagram - SQL / JSON schema extraction and relationship routing
"""
__version__ = "1.0.0"
