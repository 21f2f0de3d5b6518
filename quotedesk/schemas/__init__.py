"""
schemas/ — Pydantic request/response models for the QuoteDesk API

Provides input validation, auto-generated OpenAPI docs, and
consistent camelCase wire names across all endpoints.
"""
