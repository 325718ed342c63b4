import enum


class UserType(str, enum.Enum):
    """Closed set of account types. Each user has exactly one."""

    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"

    @classmethod
    def parse(cls, value) -> "UserType":
        """
        Convert a stored or configured value to a member.

        Only members and their exact values are accepted. There is no
        fallback member and no case folding.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value == value:
                    return member
        raise ValueError(f"Unknown user type: {value!r}")

    @property
    def label(self) -> str:
        return self.value.capitalize()
