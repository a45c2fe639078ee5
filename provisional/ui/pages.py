"""NiceGUI landing and chat pages."""

from collections.abc import Callable
from typing import Any

from nicegui import app, ui

from provisional.ui.relay_client import RelayClient
from provisional.ui.session import INITIAL_PROMPT_KEY, TRANSCRIPT_FILENAME, ChatSession

TITLE = "The Provisional v0.1: LLM fine-tuned on gpt-4.1"
RATE_LIMIT_NOTICE = "You have reached your request limit for the day."

EXAMPLE_PROMPTS = [
    "Write a short poem about the present moment. Let the sentence revise itself once. "
    "Avoid ending conclusively.",
    "Write a poem where abstraction feels social. Keep the setting indoors. "
    "Let the tone shift slightly midway.",
    "Write a poem that begins mid-thought. Allow syntax to guide the movement. "
    "End with uncertainty rather than resolution.",
]

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #f3f4f6; min-height: 100vh; }

    .panel {
        background: white;
        border: 1px solid #e5e7eb;
        border-radius: 6px;
    }

    .example-btn {
        border: 1px solid #e5e7eb;
        border-radius: 6px;
        background: white;
        color: #6b7280;
        text-align: left;
        transition: all 75ms;
    }
    .example-btn:hover { border-color: black; color: #374151; }

    .turn-user { background: white; }
    .turn-poem { background: #f3f4f6; }

    .input-box {
        background: white;
        border: 1px solid #e5e7eb;
        border-radius: 12px;
        box-shadow: 0 10px 15px -3px rgba(0, 0, 0, 0.1);
    }

    .send-btn { background: #22c55e !important; }
</style>
"""


def render_input_box(
    placeholder: str,
    on_submit: Callable[[], Any],
    trailing: Callable[[ui.textarea], None],
) -> ui.textarea:
    """Render the bottom text box; Enter submits, Shift+Enter adds a newline."""
    with ui.row().classes(
        "w-full max-w-screen-md mx-auto input-box px-4 py-2 items-end gap-2 no-wrap"
    ):
        field = (
            ui.textarea(placeholder=placeholder)
            .props("autogrow borderless dense rows=1 spellcheck=false")
            .classes("flex-grow")
            .on("keydown.enter.exact.prevent", on_submit)
        )
        trailing(field)
    return field


def render_footer() -> None:
    ui.label("Built with FastAPI, NiceGUI and a fine-tuned OpenAI GPT-4.1 model.").classes(
        "w-full text-center text-xs text-gray-400"
    )


@ui.page("/")
def home_page() -> None:
    """Landing page: pick an example or type a prompt, then move to /chat."""
    ui.add_head_html(CUSTOM_CSS)

    def start_chat(prompt: str) -> None:
        app.storage.user[INITIAL_PROMPT_KEY] = prompt
        ui.navigate.to("/chat")

    def submit_custom() -> None:
        prompt = (input_field.value or "").strip()
        if prompt:
            start_chat(prompt)

    def send_button(_: ui.textarea) -> None:
        ui.button(icon="send", on_click=submit_custom).props(
            "round unelevated dense"
        ).classes("send-btn text-white")

    with ui.column().classes("w-full max-w-screen-md mx-auto mt-20 panel gap-0"):
        with ui.column().classes("p-7 gap-4"):
            ui.label(TITLE).classes("text-lg font-semibold text-black")
            ui.label(
                "Part of a series of computational experiments. "
                "Built on a fine-tuned GPT-4.1 model."
            ).classes("text-gray-500")
        with ui.column().classes("w-full p-7 gap-4 bg-gray-50 border-t"):
            for example in EXAMPLE_PROMPTS:
                ui.button(example, on_click=lambda p=example: start_chat(p)).props(
                    "flat no-caps align=left"
                ).classes("w-full px-5 py-3 text-sm example-btn")

    with ui.footer().classes("bg-transparent flex-col items-center gap-3 p-5"):
        input_field = render_input_box("Send a message", submit_custom, send_button)
        input_field.props("autofocus")
        render_footer()


@ui.page("/chat")
def chat_page() -> None:
    """Chat page: streams poems into the transcript."""
    ui.add_head_html(CUSTOM_CSS)

    with ui.dialog() as limit_dialog, ui.card():
        ui.label(RATE_LIMIT_NOTICE)
        ui.button("OK", on_click=limit_dialog.close).props("flat")

    def on_change() -> None:
        render_transcript.refresh()
        render_toolbar.refresh()
        render_send_button.refresh()
        placeholder = "Refine or continue..." if session.turns else "Send a message"
        input_field.props(f'placeholder="{placeholder}"')

    session = ChatSession(RelayClient(), on_change=on_change, on_rate_limited=limit_dialog.open)

    async def send_message() -> None:
        await session.submit_input()

    def save_transcript() -> None:
        ui.download.content(
            session.export_transcript(), TRANSCRIPT_FILENAME, media_type="text/plain"
        )

    @ui.refreshable
    def render_toolbar() -> None:
        with ui.row().classes("fixed top-4 left-4 z-10 items-center gap-3"):
            ui.button("← Start over", on_click=lambda: ui.navigate.to("/")).props(
                "flat dense no-caps"
            ).classes("text-sm text-gray-500")
            if session.has_assistant_turn:
                ui.button("Save as .txt", on_click=save_transcript).props(
                    "outline dense no-caps"
                ).classes("text-sm text-gray-500 bg-white px-3")

    @ui.refreshable
    def render_transcript() -> None:
        if not session.turns:
            ui.label("Generating poem...").classes("mt-20 text-gray-400 text-sm self-center")
            return
        for turn in session.turns:
            is_user = turn.role == "user"
            with ui.row().classes(
                f"w-full justify-center border-b py-8 {'turn-user' if is_user else 'turn-poem'}"
            ):
                with ui.row().classes("w-full max-w-screen-md items-start gap-4 px-5 no-wrap"):
                    ui.icon("person" if is_user else "edit_note").classes(
                        "text-2xl " + ("bg-black text-white p-1" if is_user else "text-gray-600")
                    )
                    ui.label(turn.content).classes(
                        "mt-1 flex-grow break-words whitespace-pre-wrap leading-relaxed"
                    )

    @ui.refreshable
    def render_send_button(field: ui.textarea) -> None:
        if session.is_busy:
            ui.spinner(size="sm").classes("m-2")
            return
        button = ui.button(icon="send", on_click=send_message).props("round unelevated dense")
        if field.value:
            button.classes("send-btn text-white")
        else:
            button.disable()

    render_toolbar()

    with ui.column().classes("w-full gap-0 pb-40"):
        render_transcript()

    with ui.footer().classes("bg-transparent flex-col items-center gap-3 p-5"):
        input_field = render_input_box("Send a message", send_message, render_send_button)
        input_field.bind_value(session, "input")
        input_field.on("update:model-value", lambda: render_send_button.refresh())
        render_footer()

    async def seed() -> None:
        await session.seed_from_external_prompt(app.storage.user)

    ui.timer(0, seed, once=True)

