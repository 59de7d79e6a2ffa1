"""Shared domain: errors, value objects and repository contracts."""
