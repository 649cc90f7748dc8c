"""
Triage Interfaces Layer
========================

Interface adapters (controllers) for the support triage module.

Contains:
- Controllers: FastAPI route handlers
"""

from support_triage.triage.interfaces.controllers import triage_router

__all__ = ["triage_router"]
