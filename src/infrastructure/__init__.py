"""
Infrastructure layer - External concerns

This layer contains:
- Repository implementations (SQLite, file system)
- Database management and migrations
- File storage for assets
- Event bus implementation
"""

