"""Telegram channel adapter."""

import logging
from typing import Awaitable, Callable, Optional

from telegram import (
    BotCommand,
    LinkPreviewOptions,
    Message,
    MessageEntity,
    ReactionTypeEmoji,
    Update,
)
from telegram.constants import ChatMemberStatus, ChatType, ParseMode
from telegram.error import BadRequest
from telegram.ext import Application, CommandHandler, ContextTypes, MessageHandler, filters

from ..commands import CommandArgs, PlaygroundCommands
from ..communication.errors import classify_error
from ..config import PlaybotSettings
from ..formatting import Reply, help_html
from ..moderation import (
    BAN_HELP,
    CLEANUP_HELP,
    BotIdentity,
    ChatLog,
    ChatMember,
    LoggedMessage,
    format_ban,
    parse_cleanup_limit,
    parse_member,
    select_for_cleanup,
    split_ban_args,
)
from ..playground.flags import parse_command_args

logger = logging.getLogger("playbot.telegram")

COMMAND_DESCRIPTIONS = {
    "play": "Compile and run Rust code",
    "eval": "Evaluate a Rust expression and print it",
    "miri": "Run code in the Miri interpreter",
    "expand": "Expand macros",
    "clippy": "Lint code with Clippy",
    "fmt": "Format code with rustfmt",
    "microbench": "Benchmark public functions",
    "cleanup": "Delete the bot's recent messages",
    "ban": "Ban another person",
}

_MOD_STATUSES = (ChatMemberStatus.ADMINISTRATOR, ChatMemberStatus.OWNER)


def _member_from_user(user) -> ChatMember:
    return ChatMember(id=user.id, full_name=user.full_name, username=user.username)


def _author_of(message: Message) -> Optional[ChatMember]:
    """The sender of a message. Anonymous admins and channels post as a chat."""
    if message.from_user is not None:
        return _member_from_user(message.from_user)
    chat = message.sender_chat
    if chat is not None:
        return ChatMember(id=chat.id, full_name=chat.title or "", username=chat.username)
    return None


def _split_command(text: str) -> str:
    """Drop the leading /command (or /command@bot) token."""
    parts = text.split(None, 1)
    return parts[1] if len(parts) > 1 else ""


class TelegramChannel:
    """Telegram bot adapter for the playground commands."""

    def __init__(
        self,
        settings: PlaybotSettings,
        commands: PlaygroundCommands,
        identity: Optional[BotIdentity] = None,
    ):
        self.settings = settings
        self.commands = commands
        self.identity = identity
        self.chat_log = ChatLog()
        self.app: Optional[Application] = None

    def _build_application(self) -> Application:
        # each update runs as its own task, up to the configured limit
        return (
            Application.builder()
            .token(self.settings.telegram_bot_token)
            .concurrent_updates(self.settings.concurrent_updates)
            .build()
        )

    async def start(self):
        """Start the Telegram bot."""
        self.app = self._build_application()

        # Every message the bot sees goes to the chat log (group -1 runs
        # alongside the command handlers)
        self.app.add_handler(MessageHandler(filters.ALL, self._track_incoming), group=-1)

        self.app.add_handler(CommandHandler("start", self._cmd_help))
        self.app.add_handler(CommandHandler("help", self._cmd_help))
        for name, handler in self.commands.handlers().items():
            self.app.add_handler(CommandHandler(name, self._playground_handler(handler)))
        self.app.add_handler(CommandHandler("cleanup", self._cmd_cleanup))
        self.app.add_handler(CommandHandler("ban", self._cmd_ban))

        self.app.add_error_handler(self._handle_error)

        logger.info("Starting Telegram bot...")
        await self.app.initialize()

        if self.identity is None:
            me = await self.app.bot.get_me()
            self.identity = BotIdentity(id=me.id, username=me.username)
        logger.info(f"Running as @{self.identity.username} ({self.identity.id})")

        await self.app.start()
        await self.app.updater.start_polling(drop_pending_updates=True)

        await self.app.bot.set_my_commands([
            BotCommand(name, desc) for name, desc in COMMAND_DESCRIPTIONS.items()
        ])

        logger.info("Telegram bot started.")

    async def stop(self):
        """Stop the Telegram bot."""
        if self.app:
            await self.app.updater.stop()
            await self.app.stop()
            await self.app.shutdown()
            logger.info("Telegram bot stopped.")

    # ── Message plumbing ─────────────────────────────────────

    def _track(self, message: Message, author_id: int, author: Optional[ChatMember] = None):
        self.chat_log.record(
            message.chat_id,
            LoggedMessage(message_id=message.message_id, author_id=author_id, date=message.date),
            author,
        )

    async def _track_incoming(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        message = update.effective_message
        user = update.effective_user
        if message is None or user is None:
            return
        self._track(message, user.id, _member_from_user(user))

    async def _reply_html(self, message: Message, html: str, text: str) -> Message:
        """Reply with HTML, falling back to `text` if Telegram rejects the markup."""
        try:
            sent = await message.reply_text(
                html,
                parse_mode=ParseMode.HTML,
                link_preview_options=LinkPreviewOptions(is_disabled=True),
            )
        except BadRequest as e:
            logger.warning(f"HTML reply rejected ({e}), sending as plain text")
            sent = await message.reply_text(text)
        self._track(sent, self.identity.id if self.identity else sent.from_user.id)
        return sent

    async def _reply_text(self, message: Message, text: str) -> Message:
        sent = await message.reply_text(text)
        self._track(sent, self.identity.id if self.identity else sent.from_user.id)
        return sent

    async def _react(self, message: Message, emoji: str) -> bool:
        try:
            await message.get_bot().set_message_reaction(
                chat_id=message.chat_id,
                message_id=message.message_id,
                reaction=[ReactionTypeEmoji(emoji=emoji)],
            )
            return True
        except BadRequest as e:
            logger.error(f"Failed to send reaction: {e}")
            return False

    def build_args(self, message: Message) -> CommandArgs:
        """Turn a command message into CommandArgs.

        Telegram clients turn ``` fences into `pre` entities and drop the
        backticks, so a code entity wins over parsing the text.
        """
        body = _split_command(message.text or "")
        code = None

        entities = message.parse_entities([MessageEntity.PRE, MessageEntity.CODE])
        if entities:
            first = min(entities, key=lambda entity: entity.offset)
            code = entities[first]
            prefix = body.split(code, 1)[0] if code in body else body
            params, _ = parse_command_args(prefix)
        else:
            params, body = parse_command_args(body)

        async def reply(text: str):
            return await self._reply_html(message, help_html(text), text)

        async def send(result: Reply):
            return await self._reply_html(message, result.to_html(), result.to_text())

        return CommandArgs(body=body, reply=reply, send=send, params=params, code=code)

    def _playground_handler(
        self, handler: Callable[[CommandArgs], Awaitable[Optional[Reply]]],
    ) -> Callable[[Update, ContextTypes.DEFAULT_TYPE], Awaitable[None]]:
        async def _cmd(update: Update, context: ContextTypes.DEFAULT_TYPE):
            message = update.effective_message
            if message is None:
                return
            try:
                await handler(self.build_args(message))
            except Exception as e:
                logger.error(f"Command failed: {type(e).__name__}: {e}", exc_info=True)
                await self._reply_text(message, classify_error(e))
        return _cmd

    # ── Command handlers ─────────────────────────────────────

    async def _cmd_help(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle /start and /help."""
        lines = ["Available commands:", ""]
        lines += [f"/{name} — {desc}" for name, desc in COMMAND_DESCRIPTIONS.items()]
        lines += ["", "Send a command without code to see its options."]
        await self._reply_text(update.effective_message, "\n".join(lines))

    async def _is_mod(self, message: Message) -> bool:
        # in private chats the user is effectively a mod
        if message.chat.type == ChatType.PRIVATE:
            return True
        user = message.from_user
        if user is None:
            return False
        if user.id in self.settings.mod_user_ids:
            return True
        member = await message.chat.get_member(user.id)
        return member.status in _MOD_STATUSES

    async def _cmd_cleanup(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle /cleanup [limit]."""
        message = update.effective_message
        body = _split_command(message.text or "").strip()
        if body == "help":
            await self._reply_text(message, CLEANUP_HELP)
            return

        try:
            limit = parse_cleanup_limit(body)
            logger.info(f"Cleaning up {limit} messages in chat {message.chat_id}")

            is_mod = await self._is_mod(message)
            to_delete = select_for_cleanup(
                self.chat_log.recent(message.chat_id),
                bot_id=self.identity.id,
                is_mod=is_mod,
                now=message.date,
                limit=limit,
            )
            for logged in to_delete:
                await context.bot.delete_message(message.chat_id, logged.message_id)
                self.chat_log.forget(message.chat_id, logged.message_id)
        except Exception as e:
            logger.error(f"Cleanup failed: {type(e).__name__}: {e}", exc_info=True)
            await self._reply_text(message, classify_error(e))
            return

        await self._react(message, "👌")

    async def _ban_candidates(self, message: Message) -> list[ChatMember]:
        candidates = []
        reply_to = message.reply_to_message
        if reply_to is not None and reply_to.from_user is not None:
            candidates.append(_member_from_user(reply_to.from_user))
        for entity in message.entities:
            if entity.type == MessageEntity.TEXT_MENTION and entity.user is not None:
                candidates.append(_member_from_user(entity.user))
        for admin in await message.chat.get_administrators():
            candidates.append(_member_from_user(admin.user))
        candidates += self.chat_log.members(message.chat_id)
        return candidates

    async def _cmd_ban(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle /ban <member> [reason]. Nobody actually gets banned."""
        message = update.effective_message
        if message.chat.type == ChatType.PRIVATE:
            await self._reply_text(message, "🤨")
            return

        body = _split_command(message.text or "").strip()
        if body in ("", "help"):
            await self._reply_text(message, BAN_HELP)
            return

        target, reason = split_ban_args(body)
        try:
            banned = parse_member(await self._ban_candidates(message), target)
        except Exception as e:
            logger.error(f"Member lookup failed: {type(e).__name__}: {e}", exc_info=True)
            await self._reply_text(message, classify_error(e))
            return

        if banned is None:
            await self._react(message, "🤷")
            return

        author = _author_of(message)
        if author is None:
            await self._react(message, "🤷")
            return
        await self._reply_text(message, format_ban(author, banned, reason))

    async def _handle_error(self, update: object, context: ContextTypes.DEFAULT_TYPE):
        """Handle errors."""
        logger.error(f"Telegram error: {context.error}", exc_info=context.error)
