# Services package init
"""
Spacetime Backend: Services Layer
==================================

What:  Business logic between routes (HTTP) and the database.

Service Inventory:
    - MemoryService: Memory CRUD with ownership and visibility rules
    - TokenService:  JWT issue and verification
    - AuthService:   GitHub OAuth code exchange and user upsert
    - FileService:   Upload validation and storage

Each module exposes a singleton (`memory_service`, `token_service`, ...)
that routes import directly and tests patch by module path.
"""
