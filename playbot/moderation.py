"""Moderation helpers — message cleanup and the joke ban.

Telegram bots can't list chat history or all chat members, so both commands
work from what the bot has seen: a bounded per-chat log of recent messages
and their authors. Nothing here is persisted.
"""

import logging
from collections import OrderedDict, deque
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional

from .playground.errors import ParseError

logger = logging.getLogger("playbot.moderation")

DEFAULT_CLEANUP_LIMIT = 5
CLEANUP_WINDOW = timedelta(hours=24)
CHAT_LOG_SIZE = 100
KNOWN_MEMBERS_SIZE = 200

CLEANUP_HELP = """/cleanup [limit]

Deletes the bot's messages for cleanup.
You can specify how many messages to look for. Only messages from the last 24 hours can be deleted,
except for mods"""

BAN_HELP = """/ban <member> [reason]

Bans another person"""


@dataclass(frozen=True)
class BotIdentity:
    """The bot's own account. Resolved once at startup."""

    id: int
    username: str


@dataclass(frozen=True)
class ChatMember:
    id: int
    full_name: str
    username: Optional[str] = None

    @property
    def display_name(self) -> str:
        return f"@{self.username}" if self.username else self.full_name


@dataclass(frozen=True)
class LoggedMessage:
    message_id: int
    author_id: int
    date: datetime


class ChatLog:
    """Recent messages and authors per chat, bounded in size."""

    def __init__(self, size: int = CHAT_LOG_SIZE, members_size: int = KNOWN_MEMBERS_SIZE):
        self._size = size
        self._members_size = members_size
        self._messages: dict[int, deque] = {}
        self._members: dict[int, OrderedDict] = {}

    def record(self, chat_id: int, message: LoggedMessage, author: Optional[ChatMember] = None):
        self._messages.setdefault(chat_id, deque(maxlen=self._size)).append(message)
        if author is not None:
            self.remember_member(chat_id, author)

    def remember_member(self, chat_id: int, member: ChatMember):
        members = self._members.setdefault(chat_id, OrderedDict())
        members.pop(member.id, None)
        members[member.id] = member
        while len(members) > self._members_size:
            members.popitem(last=False)

    def forget(self, chat_id: int, message_id: int):
        messages = self._messages.get(chat_id)
        if not messages:
            return
        self._messages[chat_id] = deque(
            (m for m in messages if m.message_id != message_id), maxlen=self._size,
        )

    def recent(self, chat_id: int) -> list[LoggedMessage]:
        """Logged messages, newest first."""
        return list(reversed(self._messages.get(chat_id, ())))

    def members(self, chat_id: int) -> list[ChatMember]:
        """Known members, most recently seen first."""
        return list(reversed(self._members.get(chat_id, {}).values()))


def parse_cleanup_limit(body: str) -> int:
    body = body.strip()
    if not body:
        return DEFAULT_CLEANUP_LIMIT
    try:
        limit = int(body)
    except ValueError:
        raise ParseError(f"invalid message count `{body}`") from None
    if limit < 0:
        raise ParseError(f"invalid message count `{body}`")
    return limit


def select_for_cleanup(
    messages: Iterable[LoggedMessage],
    bot_id: int,
    is_mod: bool,
    now: datetime,
    limit: int,
) -> list[LoggedMessage]:
    """Pick the bot's messages to delete, in the order given (newest first).

    Non-mods can only clean up messages from the last 24 hours.
    """
    selected = []
    for message in messages:
        if len(selected) >= limit:
            break
        if message.author_id != bot_id:
            continue
        if not is_mod and now - message.date >= CLEANUP_WINDOW:
            continue
        selected.append(message)
    return selected


def parse_member(members: Iterable[ChatMember], text: str) -> Optional[ChatMember]:
    """Look up a chat member by a string.

    The lookup strategy is as follows (in order):
    1. Lookup by ID.
    2. Lookup by @mention.
    3. Lookup by username
    4. Lookup by full name, case-insensitively
    """
    members = list(members)
    text = text.strip()
    if not text:
        return None

    if text.isdigit():
        for member in members:
            if member.id == int(text):
                return member

    if text.startswith("@"):
        mention = text[1:].lower()
        for member in members:
            if member.username and member.username.lower() == mention:
                return member

    for member in members:
        if member.username == text:
            return member

    folded = text.casefold()
    for member in members:
        if member.full_name.casefold() == folded:
            return member

    return None


def split_ban_args(body: str) -> tuple[str, Optional[str]]:
    """Split `<member> [reason]`."""
    parts = body.strip().split(" ", 1)
    reason = parts[1].strip() if len(parts) > 1 else None
    return parts[0], reason or None


def format_ban(author: ChatMember, banned: ChatMember, reason: Optional[str]) -> str:
    reason_text = f" {reason}" if reason else ""
    return f"{author.display_name} banned user {banned.display_name}{reason_text}  🔨"
