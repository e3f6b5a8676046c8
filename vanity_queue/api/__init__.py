"""
API module.
Contains the FastAPI application and its routes.
"""
