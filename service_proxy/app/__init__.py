"""
Feature Proxy service package.

The proxy fronts a feature-flag evaluation client and exposes a small,
token-authenticated REST surface, enforcing:
- Readiness: nothing but metrics is served before the first sync
- Authorization: client keys and server-side tokens from configuration
- Response shaping: toggle lists, feature exports and cache headers

Structure:
- app.main: FastAPI app, routes, and service wiring.
- app.adapters: Evaluation client interface and the static implementation.
- app.domain: Readiness gate, token sets, context building, controller.
- app.validation: Client metrics schema.
"""
