"""Helpers shared by the auth and profile domains."""

from veris_identity.domain.shared.ids import generate_id
from veris_identity.domain.shared.time import utc_now

__all__ = ["generate_id", "utc_now"]
