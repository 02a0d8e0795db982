"""api/ -- FastAPI application, HTTP models and routes for TokenAuth.

Layer rule: api/ imports from auth/ and core/, never the other way around.
"""
