"""
Notely Backend.

- api/: HTTP routers (auth, notes, user profile, health)
- core/: configuration, logging, security, errors, middleware, database
- models/: SQLAlchemy models (User, Entry)
- repositories/: data access over the async session
- services/: business rules (auth, note lifecycle, profile, media)
- schemas/: pydantic request/response models
"""

__version__ = "1.0.0"
