"""
Support Triage
==============

Turns free-form support messages into structured triage records using an
LLM, and stores and serves those records.
"""

__version__ = "1.0.0"
