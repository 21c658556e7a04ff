# Services package init
"""
Journeo Backend — Services Layer
==================================

What:  Business logic between routes (HTTP) and the database (persistence).
How:   Each service is a stateless class with a module-level singleton; every
       method receives the request's AsyncSession and, where access matters,
       the resolved caller (CurrentUser).

Service Inventory:
    - access:          CurrentUser, role gate, guide visibility gate
    - auth_service:    credential check and token issue
    - user_service:    user CRUD, role change, cascading user delete
    - guide_service:   guide CRUD, listing/pagination/sorting, membership
    - activity_service: activity CRUD, schedule-ordered listing, map points
    - comment_service: comments, ratings and rating averages
    - media_service:   guide media metadata and file serving
    - media_storage:   blob storage on the local filesystem
"""
