from enum import Enum


class OAuthProvider(str, Enum):
    """External identity providers a user can sign in with."""

    GOOGLE = "google"
    APPLE = "apple"
