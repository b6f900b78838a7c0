"""UserId value object."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserId:
    """Identity of the authenticated user owning a metering profile.

    The value is the opaque subject handed over by the auth provider;
    only emptiness is checked here.

    Examples:
        >>> user_id = UserId("auth0|123456")
        >>> str(user_id)
        'auth0|123456'
    """

    value: str

    def __post_init__(self) -> None:
        """Validate and normalize the identifier."""
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError("UserId cannot be empty")
        object.__setattr__(self, "value", self.value.strip())

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"UserId('{self.value}')"
