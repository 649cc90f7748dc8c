"""
Shared Infrastructure
=====================

Cross-cutting technical concerns:
- Structured JSON logging setup
"""
