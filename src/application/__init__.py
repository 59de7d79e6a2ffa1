"""
Application layer - Use case orchestration and services

This layer contains:
- Bootstrap and the service container
- Event bus system for UI synchronization
- Application settings
"""
