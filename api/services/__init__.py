"""Service layer for catalog business logic.

Layer hierarchy:
    Routes (HTTP) -> Services (Business Logic) -> Repositories (Database)

Services should:
- Validate input and enforce existence checks
- Orchestrate repositories and the file store
- Return a ``ServiceResult`` envelope for every outcome

Services should NOT:
- Directly execute SQL queries (use repositories)
- Know about request parsing or rate limits
"""
