"""Tests for message authorship checks."""

from __future__ import annotations

import pytest

from chatroom.errors import Forbidden, NotFound
from chatroom.guard import authorize_delete, authorize_edit
from chatroom.models import MessageKind
from tests.conftest import make_message


class TestAuthorize:
    @pytest.mark.parametrize("check", [authorize_edit, authorize_delete])
    def test_author_allowed(self, check) -> None:
        msg = make_message("Alice", message_id=7)
        assert check(msg, "Alice", 7) is msg

    @pytest.mark.parametrize("check", [authorize_edit, authorize_delete])
    @pytest.mark.parametrize("kind", [MessageKind.PUBLIC, MessageKind.PRIVATE])
    @pytest.mark.parametrize("actor", ["Bob", "alice", None])
    def test_non_author_forbidden(self, check, kind: MessageKind, actor: str | None) -> None:
        msg = make_message("Alice", "Bob", kind=kind, message_id=7)
        with pytest.raises(Forbidden):
            check(msg, actor, 7)

    @pytest.mark.parametrize("check", [authorize_edit, authorize_delete])
    def test_missing_message(self, check) -> None:
        with pytest.raises(NotFound):
            check(None, "Alice", 99)

    @pytest.mark.parametrize("check", [authorize_edit, authorize_delete])
    def test_status_messages_are_immutable(self, check) -> None:
        msg = make_message("Alice", text="joined", kind=MessageKind.STATUS, message_id=1)
        with pytest.raises(Forbidden):
            check(msg, "Alice", 1)
