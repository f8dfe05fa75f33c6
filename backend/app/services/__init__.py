# Services package init
"""
DevConnect Backend — Services Layer
=====================================

What:  Business logic between routes (HTTP) and the database session.
How:   Stateless singletons; each call receives the request's AsyncSession.

Service Inventory:
    - AuthService:        bcrypt hashing and JWT issue/verify
    - AccountService:     signup, login, lookup, profile edit, password, delete
    - ConnectionService:  connection-request state machine, feed, listings
"""
