"""Core logic: errors, authorization, pagination and the verb seeder.

Modules:
- errors: Error taxonomy mapped to HTTP status codes
- authorization: Shared-secret check for translation writes
- pagination: Page/limit clamping and the Page result type
- seed_ledger: Persisted set of seeded verb files
- seeder: Idempotent verb file loader and index repair
"""

__all__ = [
    "errors",
    "authorization",
    "pagination",
    "seed_ledger",
    "seeder",
]
