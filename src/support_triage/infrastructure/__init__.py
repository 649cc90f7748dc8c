"""
Infrastructure
==============

Low-level technical concerns shared across modules:
- Database engine and session management
- LLM provider clients
"""
