"""Authentication and authorization.

Learn: One authentication path — email/password → JWT bearer token — and
two authorization checks layered on top of it:
1. Role gate: the caller's role must be in the route's allowed set
2. Ownership gate: the caller created the resource, or is an admin

Both checks are plain functions in auth/policy.py; auth/dependencies.py
wires them into FastAPI.
"""
