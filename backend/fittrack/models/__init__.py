from fittrack.models.profile import Profile

__all__ = ["Profile"]
