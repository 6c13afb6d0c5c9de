"""NiceGUI login and chat pages."""

import logging
from datetime import datetime

from nicegui import events, ui

from windchat.api.client import LoginError
from windchat.context import ChatContext, get_chat_context
from windchat.conversations.store import ConversationNotFoundError
from windchat.models.schemas import Attachment, AttachmentKind, Message, Sender, SourceFile

logger = logging.getLogger(__name__)

KIND_ICONS = {
    AttachmentKind.IMAGE: "image",
    AttachmentKind.VIDEO: "videocam",
    AttachmentKind.FOLDER: "folder",
    AttachmentKind.FILE: "description",
}

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #ffffff; min-height: 100vh; }

    .chat-item { border-radius: 8px; cursor: pointer; transition: background 0.2s; }
    .chat-item:hover { background: #f9fafb; }
    .chat-item.selected { background: #f3f4f6; }

    .avatar { background: #111827; color: white; }
    .online-dot {
        width: 10px; height: 10px;
        background: #22c55e;
        border: 2px solid white;
        border-radius: 50%;
    }
    .unread-badge { background: #111827; color: white; border-radius: 9999px; }

    .message-self {
        background: #111827;
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-other {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }

    .attachment-card { border: 1px solid #e5e7eb; border-radius: 8px; background: #f9fafb; }

    .input-box {
        background: #f9fafb;
        border: 1px solid #e5e7eb;
        border-radius: 12px;
        transition: border-color 0.2s;
    }
    .input-box:focus-within { border-color: #111827; }
</style>
"""


def relative_time(moment: datetime | None, now: datetime | None = None) -> str:
    """Compact age for the chat list: "now", "2m", "1h", "3d"."""
    if moment is None:
        return ""
    now = now or datetime.now(moment.tzinfo)
    seconds = int((now - moment).total_seconds())
    if seconds < 60:
        return "now"
    if seconds < 3600:
        return f"{seconds // 60}m"
    if seconds < 86400:
        return f"{seconds // 3600}h"
    return f"{seconds // 86400}d"


def clock_time(moment: datetime) -> str:
    return moment.strftime("%I:%M %p")


async def _source_file(e: events.UploadEventArguments) -> SourceFile:
    content = await e.file.read()
    return SourceFile(
        name=e.file.name,
        byte_size=len(content),
        mime_type=e.file.content_type or "application/octet-stream",
        content=content,
    )


@ui.page("/login")
async def login_page() -> None:
    """Email/password sign-in page."""
    ui.add_head_html(CUSTOM_CSS)
    ctx = get_chat_context()

    await ctx.session.bootstrap()
    if ctx.session.is_authenticated:
        ui.navigate.to("/")
        return

    async def submit() -> None:
        error_label.set_visibility(False)
        button.disable()
        try:
            await ctx.session.sign_in(email.value, password.value)
        except LoginError as e:
            logger.info(f"Sign-in failed ({e.reason.value})")
            error_label.set_text(e.message)
            error_label.set_visibility(True)
            return
        finally:
            button.enable()
        ui.navigate.to("/")

    with ui.column().classes("w-full min-h-screen items-center justify-center bg-gray-50"):
        with ui.card().classes("p-8 w-96"):
            ui.label("Sign In").classes("text-xl font-bold mb-2")
            error_label = ui.label().classes(
                "w-full p-3 rounded-lg bg-red-50 border border-red-200 text-red-600 text-sm"
            )
            error_label.set_visibility(False)
            email = ui.input("Email").props("type=email").classes("w-full")
            password = (
                ui.input("Password", password=True)
                .classes("w-full")
                .on("keydown.enter", submit)
            )
            button = ui.button("Login", on_click=submit).classes("w-full mt-2")


@ui.page("/")
async def chat_page() -> None:
    """Main chat page: conversation list, transcript and composer."""
    ui.add_head_html(CUSTOM_CSS)
    ctx: ChatContext = get_chat_context()

    await ctx.session.bootstrap()
    if not ctx.session.is_authenticated:
        ui.navigate.to("/login")
        return

    if not ctx.store.list_conversations():
        await ctx.load_conversations()

    def render_attachment(attachment: Attachment) -> None:
        with ui.column().classes("attachment-card p-3 gap-2 max-w-xs"):
            if attachment.kind is AttachmentKind.IMAGE and attachment.url:
                ui.image(attachment.url).classes("w-full h-32 rounded")
            with ui.row().classes("items-center gap-2 no-wrap"):
                ui.icon(KIND_ICONS[attachment.kind]).classes("text-gray-600")
                with ui.column().classes("gap-0 min-w-0"):
                    ui.label(attachment.name).classes("text-sm font-medium truncate")
                    ui.label(attachment.size).classes("text-xs text-gray-500")

    def render_message(msg: Message) -> None:
        is_self = msg.sender is Sender.SELF
        align = "justify-end" if is_self else "justify-start"
        bubble = "message-self" if is_self else "message-other"

        with ui.row().classes(f"w-full {align}"):
            with ui.column().classes("max-w-[70%] gap-1"):
                if msg.text.strip():
                    with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                        ui.label(msg.text).classes("text-sm whitespace-pre-wrap")
                for attachment in msg.attachments:
                    render_attachment(attachment)
                ui.label(clock_time(msg.created_at)).classes(
                    f"text-[10px] text-gray-400 {'self-end' if is_self else 'self-start'}"
                )

    def select(conversation_id: str) -> None:
        ctx.store.select_conversation(conversation_id)
        refresh_all()

    @ui.refreshable
    def chat_list() -> None:
        for chat in ctx.store.list_conversations():
            selected = " selected" if chat.id == ctx.store.active_id else ""
            with (
                ui.row()
                .classes(f"chat-item{selected} w-full p-3 gap-3 items-center no-wrap")
                .on("click", lambda _, cid=chat.id: select(cid))
            ):
                with ui.element("div").classes("relative"):
                    with ui.element("div").classes(
                        "avatar w-10 h-10 rounded-full flex items-center justify-center"
                    ):
                        ui.label(chat.avatar).classes("text-sm font-medium")
                    if chat.is_online:
                        ui.element("div").classes("online-dot absolute bottom-0 right-0")
                with ui.column().classes("flex-grow gap-0 min-w-0"):
                    with ui.row().classes("w-full justify-between no-wrap"):
                        ui.label(chat.name).classes("font-medium truncate")
                        ui.label(relative_time(chat.last_message_time)).classes(
                            "text-xs text-gray-500"
                        )
                    with ui.row().classes("w-full justify-between no-wrap"):
                        ui.label(chat.last_message_preview).classes(
                            "text-sm text-gray-600 truncate"
                        )
                        if chat.unread_count:
                            ui.label(str(chat.unread_count)).classes(
                                "unread-badge text-xs px-2"
                            )

    @ui.refreshable
    def transcript() -> None:
        active = ctx.store.active_id
        if active is None:
            with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                ui.icon("forum").classes("text-5xl text-gray-300")
                ui.label("Select a conversation").classes("text-lg text-gray-400")
            return
        conversation = ctx.store.get_conversation(active)
        with ui.row().classes("w-full px-5 py-3 border-b items-center gap-3"):
            ui.label(conversation.name).classes("font-semibold")
            ui.label("Active now" if conversation.is_online else "Offline").classes(
                "text-xs text-gray-500"
            )
        with ui.column().classes("w-full p-5 gap-4"):
            for msg in ctx.store.messages(active):
                render_message(msg)

    @ui.refreshable
    def staged_tray() -> None:
        if ctx.stager.is_empty:
            return
        with ui.column().classes("w-full px-4 pt-3 gap-2"):
            with ui.row().classes("w-full justify-between items-center"):
                ui.label(f"Selected Files ({len(ctx.stager)})").classes("text-sm font-medium")
                ui.button(icon="close", on_click=clear_staged).props("flat round dense")
            with ui.row().classes("gap-2"):
                for index, entry in enumerate(ctx.stager.staged):
                    preview = ctx.stager.preview_for(entry)
                    with ui.row().classes("attachment-card p-2 items-center gap-2 no-wrap"):
                        if preview is not None:
                            ui.image(preview.url).classes("w-10 h-10 rounded")
                        else:
                            ui.icon(KIND_ICONS[entry.kind]).classes("text-gray-600")
                        with ui.column().classes("gap-0"):
                            ui.label(entry.name).classes("text-sm truncate")
                            ui.label(entry.human_size).classes("text-xs text-gray-500")
                        ui.button(
                            icon="close",
                            on_click=lambda _, i=index: remove_staged(i),
                        ).props("flat round dense size=sm")

    def refresh_all() -> None:
        chat_list.refresh()
        transcript.refresh()
        staged_tray.refresh()

    def remove_staged(index: int) -> None:
        ctx.stager.remove_file(index)
        staged_tray.refresh()

    def clear_staged() -> None:
        ctx.stager.clear()
        staged_tray.refresh()

    async def handle_upload(e: events.UploadEventArguments) -> None:
        source = await _source_file(e)
        rejected = ctx.stager.add_files([source])
        for file in rejected:
            ui.notify(f"{file.name} is too large to attach", type="warning")
        staged_tray.refresh()

    def send_message() -> None:
        active = ctx.store.active_id
        if active is None:
            return
        try:
            message = ctx.compositor.send(ctx.draft, active)
        except ConversationNotFoundError:
            ui.notify("This conversation is no longer available", type="negative")
            return
        if message is None:
            return
        uploader.reset()
        refresh_all()

    def logout() -> None:
        ctx.sign_out()
        ui.navigate.to("/login")

    # === UI Layout ===
    with ui.row().classes("w-full h-screen no-wrap gap-0"):
        # Chat list sidebar
        with ui.column().classes("w-80 h-full border-r gap-0"):
            with ui.row().classes("w-full p-4 border-b items-center justify-between"):
                ui.label("Messages").classes("text-xl font-semibold")
                with ui.row().classes("items-center gap-1"):
                    user = ctx.session.user
                    if user is not None:
                        ui.label(user.username).classes("text-sm text-gray-500")
                    ui.button(icon="logout", on_click=logout).props("flat round dense")
            with ui.scroll_area().classes("flex-grow w-full"):
                with ui.column().classes("w-full p-2 gap-1"):
                    chat_list()

        # Conversation
        with ui.column().classes("flex-grow h-full gap-0"):
            with ui.scroll_area().classes("flex-grow w-full bg-gray-50"):
                transcript()

            staged_tray()

            with ui.row().classes("w-full p-4 gap-3 items-end border-t no-wrap"):
                uploader = (
                    ui.upload(on_upload=handle_upload, multiple=True, auto_upload=True)
                    .props("flat dense hide-upload-btn")
                    .classes("w-40")
                )
                with ui.element("div").classes("flex-grow input-box px-3 py-2"):
                    (
                        ui.textarea(placeholder="Type a message...")
                        .props("autogrow borderless dense rows=1")
                        .classes("w-full")
                        .bind_value(ctx.draft, "text")
                        .on("keydown.enter.prevent", send_message)
                    )
                ui.button(icon="send", on_click=send_message).props("round unelevated")

