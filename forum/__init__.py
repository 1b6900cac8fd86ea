"""
Forum — Application Package
============================

A question-and-answer forum served as HTML pages.

    ┌─────────────────────────────────────┐
    │     Routes (controllers)            │  ← access check, bind, redirect/render
    ├─────────────────────────────────────┤
    │     Forms · Security · Templating   │  ← validation, decisions, pages
    ├─────────────────────────────────────┤
    │     Repositories                    │  ← load, page, save, delete
    ├─────────────────────────────────────┤
    │     Models · Database               │  ← SQLAlchemy async ORM
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
