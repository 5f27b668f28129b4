"""Pydantic Schemas — request validation for API endpoints.

Invariants:
    - Schemas validate request shape at the boundary; record rules stay in core validators
    - Domain enums from core/ used for enum-valued query parameters

Design Decisions:
    - Record bodies are free-form dicts: the core validator reports every field
      issue in one pass, Pydantic would stop at the request shape
"""
