"""
Configuration errors detected while building the bank registry.
"""


class DuplicateInstitutionError(Exception):
    """
    Raised when two normalizers claim the same institution identifier.

    This is a startup error: the registry is assembled once at import time,
    so a duplicate never surfaces during a request.
    """

    def __init__(self, institution_id: str, existing: str = None, duplicate: str = None):
        self.institution_id = institution_id
        self.existing = existing
        self.duplicate = duplicate

        details = []
        if existing:
            details.append(f"registered by: {existing}")
        if duplicate:
            details.append(f"claimed again by: {duplicate}")

        message = f"Institution {institution_id} already has a normalizer"
        full_message = f"{message} ({', '.join(details)})" if details else message
        super().__init__(full_message)
