"""
Shared API
==========

HTTP middleware and exception handling shared by all routers.
"""
