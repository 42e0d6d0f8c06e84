"""
API module for FastAPI routes.

Routes are organized by domain under api.routes and mounted by
api.app.create_app().
"""
