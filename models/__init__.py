"""
This module centralizes the imports for all models so that Alembic
autogeneration sees every table registered on ``Base.metadata``.
"""

# Import all models here

from src.user.models import User as User  # Re-export the User model explicitly
