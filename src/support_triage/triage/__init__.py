"""
Triage Module
=============

Bounded Context for turning free-form support messages into structured
triage records.

Responsibilities:
- Validate incoming messages before any model call
- Ask the LLM for title, category, priority, summary, reply and confidence
- Repair or replace malformed model output
- Flag low-confidence results for human review
- Store and serve triage records from PostgreSQL
"""

__version__ = "1.0.0"
