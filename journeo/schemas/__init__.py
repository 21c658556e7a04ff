"""
Journeo Backend — API Schemas
===============================

What:  Pydantic models defining the JSON contract of every endpoint.
How:   All models derive from CamelModel: camelCase on the wire, snake_case
       in Python, snake_case also accepted on input.

Schema Inventory:
    - common.py:   CamelModel, ErrorResponse, HealthResponse
    - auth.py:     LoginRequest, LoginResponse
    - user.py:     UserCreateRequest, UserUpdateRequest, RoleChangeRequest, UserResponse
    - guide.py:    GuideRequest, GuideResponse, GuidePage
    - activity.py: ActivityRequest, ActivityResponse, ActivityMapPoint
    - comment.py:  CommentRequest, CommentResponse
    - media.py:    MediaResponse
"""
