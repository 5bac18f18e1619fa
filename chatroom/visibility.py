# chatroom/visibility.py
from typing import Iterable

from .models import Message, MessageKind


def is_visible(message: Message, viewer: str | None) -> bool:
    if message.kind != MessageKind.PRIVATE.value:
        return True
    return viewer is not None and viewer in (message.sender, message.recipient)


def filter_for_viewer(
    messages: Iterable[Message],
    viewer: str | None,
    limit: int | None = None,
) -> list[Message]:
    """Messages ``viewer`` may see, in their original order.

    ``limit`` keeps only the most recent visible entries; ``None`` or ``0``
    keeps everything. Truncation is applied after filtering.
    """
    visible = [message for message in messages if is_visible(message, viewer)]
    if limit:
        return visible[-limit:]
    return visible
