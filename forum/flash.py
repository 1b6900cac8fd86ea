"""
Forum — Flash Notices
======================

Short-lived notices stored in the session by an action and shown (then
dropped) by the next rendered page. Actions store a short key
("answer_created_successfully"); templates translate it with the `trans`
filter.
"""

from typing import Dict, List, Tuple

from starlette.requests import Request

FLASH_SESSION_KEY = "_flashes"

MESSAGES: Dict[str, str] = {
    "answer_created_successfully": "Your answer has been posted.",
    "answer_updated_successfully": "The answer has been updated.",
    "answer.deleted_successfully": "The answer has been deleted.",
    "question_created_successfully": "The question has been created.",
    "message_updated_successfully": "Changes saved.",
    "message.updated_successfully": "Your password has been changed.",
    "message.deleted_successfully": "The question and its answers have been deleted.",
    "user_updated_successfully": "The user has been updated.",
    "user_registered_successfully": "Your account has been created. Welcome!",
    "logged_out_successfully": "You have been logged out.",
}


def add_flash(request: Request, category: str, key: str) -> None:
    flashes = list(request.session.get(FLASH_SESSION_KEY, []))
    flashes.append([category, key])
    request.session[FLASH_SESSION_KEY] = flashes


def pop_flashes(request: Request) -> List[Tuple[str, str]]:
    """Return and clear the pending notices as (category, key) pairs."""
    if "session" not in request.scope:
        return []
    flashes = request.session.pop(FLASH_SESSION_KEY, [])
    return [(category, key) for category, key in flashes]


def translate(key: str) -> str:
    return MESSAGES.get(key, key)
