"""
Student Project Tracker
Blueprint registry.

Every blueprint here is a thin HTTP layer: it validates the body with a
pydantic schema, calls one service function and wraps the result with
app.utils.errors.api_ok.  Errors travel as AppError subclasses to the
app-wide handlers.
"""
