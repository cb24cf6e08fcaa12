"""
Capsule application-specific code.

This package contains the Capsule rooms API:
- auth: Credential lifecycle (signup, login, verification, password reset)
- rooms: Time capsule rooms and saved rooms
- media: Photo uploads to object storage
- calendar: Google Calendar linking and events
- routers / schemas: HTTP surface

Uses generic infrastructure from the common/ package.
"""
