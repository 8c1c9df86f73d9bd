"""
Inkwell Backend: Middleware Package
====================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: Generate correlation ID for logging and error bodies
    2. Logging: One access line per request, tagged with that ID
    3. CORS: FastAPI's CORSMiddleware (handles preflight)

Authentication is NOT middleware here. Private routes declare the
`CurrentClaim` dependency, so public routes never pay for token checks.
"""
