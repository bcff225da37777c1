from .base import CamelModel, QueryStatus, UserRole
