"""
Forum — Route Handlers (Controllers)
=====================================

Each action orchestrates one request: check access, resolve the entity,
bind the form, branch on validity, persist or not, flash a notice, then
redirect (303) or render.

Route Inventory:
    - home.py:      GET  /
    - questions.py: /questions/ (list, show + inline answer, create, edit, delete)
    - answers.py:   /answer/    (list, show, create, edit, delete, best)
    - users.py:     /user/      (list, show, edit, change_password)
    - auth.py:      /login, /logout, /register
    - health.py:    GET  /health (JSON)

Ids in paths use the `posint` convertor registered by forum.routing, which
every route module imports before declaring its routes.
"""
