# chatroom/guard.py
from .errors import Forbidden, NotFound
from .models import Message, MessageKind


def _authorize(message: Message | None, actor: str | None, message_id: int, verb: str) -> Message:
    if message is None:
        raise NotFound(f"message {message_id} not found")
    if message.kind == MessageKind.STATUS.value:
        raise Forbidden(f"cannot {verb} status message {message_id}")
    if actor is None or actor != message.sender:
        raise Forbidden(f"only the author can {verb} message {message_id}")
    return message


def authorize_edit(message: Message | None, actor: str | None, message_id: int) -> Message:
    return _authorize(message, actor, message_id, "edit")


def authorize_delete(message: Message | None, actor: str | None, message_id: int) -> Message:
    return _authorize(message, actor, message_id, "delete")
