import re

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "password"

# Positive integer without leading zeros: user7 is valid, user07 and user0 are not.
_NUMBERED_USER = re.compile(r"^user([1-9][0-9]*)$")


def check_credentials(username: str | None, password: str | None) -> bool:
    """Fixed demo credentials: admin/password or user<N>/Password<N>."""
    if not username or password is None:
        return False
    if username == ADMIN_USERNAME:
        return password == ADMIN_PASSWORD
    match = _NUMBERED_USER.match(username)
    return match is not None and password == f"Password{match.group(1)}"
