# Routes package init
"""
Journeo Backend — API Routes Package
======================================

What:  HTTP route handlers that accept requests and return responses.
How:   One module per resource; all except health are mounted under API_PREFIX.

Route Inventory:
    - auth.py:        POST /auth/login
    - users.py:       /users CRUD, role change, a user's guides, GET /users/ping
    - guides.py:      /guides CRUD, listing (optionally paginated), membership
    - activities.py:  /activities/guide/{id} list/map/create, /activities/{id} update/delete
    - comments.py:    /guides/{id}/comments create/list/delete
    - media.py:       /guides/{id}/media upload/list/delete, GET /media/files/{name}
    - health.py:      GET /health
    - deps.py:        bearer-token dependencies (current user, optional user, admin)

Routes stay thin: they parse the request, resolve the caller, call one
service method and shape the response. Business rules live in services.
"""
