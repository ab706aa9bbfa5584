"""API support module - middleware and request dependencies."""
