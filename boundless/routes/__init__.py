# boundless/routes/__init__.py
"""Router registry.

Single source of truth for FastAPI route inclusion.

Guidelines:
- Keep this list deterministic and explicit.
- Each router must be mounted exactly once (no duplicates).
- Group routers by functional domain to reduce cognitive load.
"""

from __future__ import annotations

from boundless.routes.diag_routes import router as diag_router
from boundless.routes.hackathon_routes import router as hackathon_router
from boundless.routes.judging_routes import router as judging_router
from boundless.routes.organization_routes import router as organization_router
from boundless.routes.public_routes import router as public_router
from boundless.routes.registration_routes import router as registration_router
from boundless.routes.submission_routes import router as submission_router

# Deterministic inclusion order:
# 1) Diagnostics
# 2) Organizations / membership
# 3) Hackathon lifecycle (drafts, publish, registration, submissions, judging)
# 4) Public pages
routers = [
    diag_router,
    organization_router,
    hackathon_router,
    registration_router,
    submission_router,
    judging_router,
    public_router,
]

__all__ = ["routers"]
