"""
Parsing of seating plan requests.

Request body:
    {
      "block": "A",
      "rooms": [
        {"roomNumber": "101",
         "branches": [{"branch": "CSE", "subject": "DS", "studentsCount": 4}]}
      ]
    }
"""

import re

from config import BRANCH_ALIASES
from exceptions import MalformedRequestError
from room_assignment import BranchRequirement, RoomRequest

_UNSAFE_BLOCK_CHARS = re.compile(r'[^a-zA-Z0-9\s\-]')


def sanitize_block(block):
    """Strip everything but letters, digits, whitespace and hyphens."""
    return _UNSAFE_BLOCK_CHARS.sub('', str(block))


def normalize_branch(branch, aliases=None):
    """Map a UI branch code to the label stored on student records."""
    aliases = BRANCH_ALIASES if aliases is None else aliases
    return aliases.get(branch, branch)


def _required_text(value, field, where):
    if not isinstance(value, (str, int)) or isinstance(value, bool) or not str(value).strip():
        raise MalformedRequestError(f"{where}: '{field}' is required", field=field)
    return str(value).strip()


def _parse_count(value, where):
    if isinstance(value, bool):
        count = None
    elif isinstance(value, int):
        count = value
    elif isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        count = int(value.strip())
    else:
        count = None

    if count is None:
        raise MalformedRequestError(
            f"{where}: 'studentsCount' must be a whole number", field='studentsCount'
        )
    if count <= 0:
        raise MalformedRequestError(
            f"{where}: 'studentsCount' must be greater than zero, got {count}",
            field='studentsCount', value=count
        )
    return count


def parse_room(raw, aliases=None):
    if not isinstance(raw, dict):
        raise MalformedRequestError("Each room must be an object", field='rooms')

    room = _required_text(raw.get('roomNumber'), 'roomNumber', 'Room')
    where = f"Room {room}"

    branches = raw.get('branches')
    if not isinstance(branches, list) or not branches:
        raise MalformedRequestError(f"{where}: 'branches' must be a non-empty list",
                                    field='branches', room=room)

    requirements = []
    seen = set()
    for entry in branches:
        if not isinstance(entry, dict):
            raise MalformedRequestError(f"{where}: each branch entry must be an object",
                                        field='branches', room=room)
        branch = normalize_branch(_required_text(entry.get('branch'), 'branch', where), aliases)
        subject = _required_text(entry.get('subject'), 'subject', f"{where} {branch}")
        count = _parse_count(entry.get('studentsCount'), f"{where} {branch}")

        if branch in seen:
            raise MalformedRequestError(f"{where}: branch {branch} is listed more than once",
                                        field='branch', room=room, branch=branch)
        seen.add(branch)
        requirements.append(BranchRequirement(branch, subject, count))

    return RoomRequest(room, requirements)


def parse_seating_request(body, aliases=None):
    """
    Validate the shape of a request and build the batch input.

    Args:
        body: Decoded JSON request
        aliases: Branch alias table, defaults to config.BRANCH_ALIASES

    Returns:
        Tuple of (sanitized block, list of RoomRequest)

    Raises:
        MalformedRequestError: on any missing, duplicate or invalid field
    """
    if not isinstance(body, dict):
        raise MalformedRequestError("Request body must be an object")

    block = sanitize_block(_required_text(body.get('block'), 'block', 'Request')).strip()
    if not block:
        raise MalformedRequestError("Request: 'block' has no usable characters", field='block')

    raw_rooms = body.get('rooms')
    if not isinstance(raw_rooms, list) or not raw_rooms:
        raise MalformedRequestError("Request: 'rooms' must be a non-empty list", field='rooms')

    rooms = []
    seen = set()
    for raw in raw_rooms:
        room = parse_room(raw, aliases)
        if room.room in seen:
            raise MalformedRequestError(f"Room {room.room} appears more than once",
                                        field='roomNumber', room=room.room)
        seen.add(room.room)
        rooms.append(room)

    return block, rooms
