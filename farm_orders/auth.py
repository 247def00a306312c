from typing import Optional

from fastapi import Header


async def get_current_user_id(
    x_user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
) -> Optional[int]:
    """Acting user id, as set by the authentication layer in front of the service.

    Returns ``None`` when no identity was supplied or the header is not an
    integer id; callers decide whether that is acceptable.
    """
    if x_user_id is None:
        return None
    try:
        return int(x_user_id.strip())
    except ValueError:
        return None
