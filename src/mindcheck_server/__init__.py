"""mindcheck_server — FastAPI REST API for the mindcheck assessment SDK.

Exposes the AssessmentEngine as a stateless HTTP API with session
management, step-by-step answering, per-user history and progress, the
chat companion, counselor booking, and reference data endpoints.
"""
