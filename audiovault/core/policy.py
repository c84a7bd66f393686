# ============================================================================
# FILE: audiovault/core/policy.py
# Owner-vs-admin access decisions. Pure: no storage access.
# ============================================================================
import enum
from dataclasses import dataclass
from typing import Dict, Optional, Tuple
from audiovault.core.exceptions import ConflictError, UnauthorizedError


class ResourceKind(str, enum.Enum):
    AUDIO_FILE = "audio_file"
    PLAYLIST = "playlist"
    PLAYLIST_ITEM = "playlist_item"
    USER = "user"


class Action(str, enum.Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    LIST = "list"          # list-own / list-by-user
    LIST_ALL = "list_all"
    ADD = "add"
    REMOVE = "remove"


class Rule(str, enum.Enum):
    ANYONE = "anyone"
    OWNER = "owner"
    OWNER_OR_ADMIN = "owner_or_admin"
    ADMIN = "admin"


@dataclass(frozen=True)
class Principal:
    """The authenticated caller as seen by the policy"""
    id: str
    is_admin: bool = False


# (resource, action) -> rule. Anything missing is denied.
POLICY_TABLE: Dict[Tuple[ResourceKind, Action], Rule] = {
    (ResourceKind.AUDIO_FILE, Action.CREATE): Rule.ANYONE,
    (ResourceKind.AUDIO_FILE, Action.READ): Rule.OWNER_OR_ADMIN,
    (ResourceKind.AUDIO_FILE, Action.DELETE): Rule.OWNER_OR_ADMIN,
    (ResourceKind.AUDIO_FILE, Action.LIST): Rule.OWNER_OR_ADMIN,
    (ResourceKind.PLAYLIST, Action.CREATE): Rule.ANYONE,
    (ResourceKind.PLAYLIST, Action.LIST): Rule.ANYONE,
    (ResourceKind.PLAYLIST, Action.LIST_ALL): Rule.ADMIN,
    (ResourceKind.PLAYLIST, Action.READ): Rule.OWNER_OR_ADMIN,
    (ResourceKind.PLAYLIST, Action.DELETE): Rule.OWNER_OR_ADMIN,
    (ResourceKind.PLAYLIST, Action.UPDATE): Rule.OWNER,
    # Admins may read and delete playlists but never edit their items
    (ResourceKind.PLAYLIST_ITEM, Action.ADD): Rule.OWNER,
    (ResourceKind.PLAYLIST_ITEM, Action.REMOVE): Rule.OWNER,
    (ResourceKind.USER, Action.CREATE): Rule.ADMIN,
    (ResourceKind.USER, Action.LIST): Rule.ADMIN,
    (ResourceKind.USER, Action.DELETE): Rule.ADMIN,
}

_DENY_MESSAGES = {
    (ResourceKind.AUDIO_FILE, Action.READ): "Not authorized to access this audio file",
    (ResourceKind.AUDIO_FILE, Action.DELETE): "Not authorized to delete this audio file",
    (ResourceKind.AUDIO_FILE, Action.LIST): "Not authorized to access this user's files",
    (ResourceKind.PLAYLIST, Action.READ): "Not authorized to access this playlist",
    (ResourceKind.PLAYLIST, Action.DELETE): "Not authorized to delete this playlist",
    (ResourceKind.PLAYLIST, Action.UPDATE): "Not authorized to modify this playlist",
    (ResourceKind.PLAYLIST_ITEM, Action.ADD): "Not authorized to modify this playlist",
    (ResourceKind.PLAYLIST_ITEM, Action.REMOVE): "Not authorized to modify this playlist",
    (ResourceKind.USER, Action.CREATE): "Only admin users can create new users",
    (ResourceKind.USER, Action.LIST): "Only admin users can list all users",
    (ResourceKind.USER, Action.DELETE): "Only admin users can delete users",
}


def is_allowed(
    principal: Principal,
    kind: ResourceKind,
    action: Action,
    owner_id: Optional[str] = None,
) -> bool:
    """
    Decide whether `principal` may perform `action` on a resource.

    Args:
        principal: The caller
        kind: Resource kind being acted on
        action: Requested action
        owner_id: Owning user id of the resource. For list-by-user this is
            the target user; for playlist items it is the playlist owner.

    Returns:
        True when the policy table allows the action
    """
    rule = POLICY_TABLE.get((kind, action))
    if rule is None:
        return False

    is_owner = owner_id is not None and owner_id == principal.id

    if rule is Rule.ANYONE:
        return True
    if rule is Rule.ADMIN:
        return principal.is_admin
    if rule is Rule.OWNER:
        return is_owner
    return is_owner or principal.is_admin


def authorize(
    principal: Principal,
    kind: ResourceKind,
    action: Action,
    owner_id: Optional[str] = None,
    target_id: Optional[str] = None,
) -> None:
    """
    Raise unless the action is allowed.

    Raises:
        UnauthorizedError: the policy table denies the action
        ConflictError: an admin tries to delete their own account
    """
    if not is_allowed(principal, kind, action, owner_id):
        message = _DENY_MESSAGES.get((kind, action), "Not authorized")
        raise UnauthorizedError(message)

    if kind is ResourceKind.USER and action is Action.DELETE and target_id == principal.id:
        raise ConflictError("Cannot delete your own account")
