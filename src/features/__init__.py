"""
Features module - Vertical Feature Organization

Each feature module contains all related code organized by layer:
- domain/: Entities, value objects
- application/: Operations over project snapshots, services

Features:
- interfaces/: Global interface catalog
- components/: Components and their interfaces
- connections/: Connections and the compatibility engine
- system_views/: Saved layouts and visibility over the component graph
- projects/: Project aggregate, store operations, normalization, library
- templates/: Starter projects
"""
