"""
Routers module - API endpoint handlers organized by feature.

- google_auth: Google OAuth login and callback
- events: Calendar event creation
"""
