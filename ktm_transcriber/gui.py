"""Tkinter desktop GUI for KTM Transcriber.

WHY: Users want to drop in a recording, tick a few options, and read the
transcript, without touching APIs or keys beyond a one-time .env entry.

HOW: TranscriberApp owns a ScreenController and shows one of three
frames: MainView (source + settings), LoadingView (cosmetic progress),
ResultView (transcript, copy, restart). The async Gemini call runs via
asyncio.run() in a background thread so the tkinter main loop keeps
animating; the finished TranscriptionResult comes back through a
thread-safe queue polled with .after().

RULES:
- tkinter widgets are ONLY touched from the main thread
- The result queue is the ONLY communication channel between threads
- Only one transcription is in flight; there is no cancel button
- File size/type validation happens before any API call (InputState)
- Loading animation reads a LoadingTicker; it never reflects real progress
"""

from __future__ import annotations

import asyncio
import logging
import queue
import threading
import tkinter as tk
from pathlib import Path
from tkinter import filedialog, ttk
from typing import Callable, Dict, List, Optional, Tuple

from ktm_transcriber.config import (
    LANGUAGES,
    LOG_LEVEL,
    MEDIA_MIME_TYPES,
    MODELS,
    load_config,
)
from ktm_transcriber.core.controller import ScreenController, ScreenState
from ktm_transcriber.core.progress import LoadingTicker
from ktm_transcriber.core.result import TranscriptionResult
from ktm_transcriber.core.view_state import (
    COPY_FEEDBACK_S,
    COPY_LABEL,
    CopyFeedback,
    InputState,
)
from ktm_transcriber.service import TranscriptionService

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_WINDOW_TITLE = "KTM Transcriber"
_WINDOW_MIN_WIDTH = 640
_WINDOW_MIN_HEIGHT = 560
_PAD = 8
_POLL_MS = 100

# (settings field, checkbox label)
_TOGGLE_OPTIONS: List[Tuple[str, str]] = [
    ("enable_punctuation", "Auto Punctuation"),
    ("enable_diarization", "Identify Speakers"),
    ("enable_summarization", "Generate Summary"),
    ("add_timestamps", "Add Timestamps"),
    ("filter_profanity", "Filter Profanity"),
]

_SUCCESS_COLOR = "#4ade80"
_FAILURE_COLOR = "#f87171"
_ERROR_COLOR = "#fca5a5"


def _label_for(choices: List[Tuple[str, str]], value: str) -> str:
    for code, label in choices:
        if code == value:
            return label
    return value


def _value_for(choices: List[Tuple[str, str]], label: str) -> str:
    for code, choice_label in choices:
        if choice_label == label:
            return code
    return label


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------

class MainView(ttk.Frame):
    """Source selection, advanced settings, and the Transcribe button."""

    def __init__(
        self,
        parent: tk.Misc,
        controller: ScreenController,
        on_submit: Callable[[], None],
    ) -> None:
        super().__init__(parent, padding=_PAD)
        self._controller = controller
        self._on_submit = on_submit
        self.input_state = InputState()
        self._advanced_open = False
        self._toggle_vars: Dict[str, tk.BooleanVar] = {}
        self._build()

    def _build(self) -> None:
        ttk.Label(
            self, text=_WINDOW_TITLE, font=("TkDefaultFont", 18, "bold")
        ).pack(pady=(0, 4))
        ttk.Label(
            self,
            text="Transform your audio and video into accurate, readable text "
                 "with the power of Gemini.",
            foreground="gray",
        ).pack(pady=(0, _PAD))

        self._error_label = ttk.Label(self, text="", foreground=_ERROR_COLOR)
        self._error_label.pack(fill=tk.X)

        # --- File ---
        file_frame = ttk.LabelFrame(self, text="Upload File", padding=_PAD)
        file_frame.pack(fill=tk.X, pady=(0, _PAD))
        self._file_label = ttk.Label(
            file_frame, text="No file selected", foreground="gray"
        )
        self._file_label.pack(side=tk.LEFT, fill=tk.X, expand=True)
        self._browse_btn = ttk.Button(
            file_frame, text="Upload File", command=self._browse_file
        )
        self._browse_btn.pack(side=tk.RIGHT)

        ttk.Label(self, text="OR", foreground="gray").pack()

        # --- URL ---
        url_frame = ttk.LabelFrame(self, text="Media URL", padding=_PAD)
        url_frame.pack(fill=tk.X, pady=(0, _PAD))
        self._url_var = tk.StringVar()
        self._url_var.trace_add("write", self._on_url_changed)
        ttk.Entry(url_frame, textvariable=self._url_var).pack(fill=tk.X)

        # --- Advanced settings ---
        ttk.Button(
            self, text="Advanced Settings", command=self._toggle_advanced
        ).pack(pady=(0, _PAD))
        self._advanced_frame = ttk.LabelFrame(self, text="Settings", padding=_PAD)
        self._build_settings(self._advanced_frame)

        self._transcribe_btn = ttk.Button(
            self, text="Transcribe", command=self._submit, state=tk.DISABLED
        )
        self._transcribe_btn.pack(fill=tk.X, side=tk.BOTTOM, pady=(_PAD, 0))

    def _build_settings(self, frame: ttk.LabelFrame) -> None:
        settings = self._controller.settings

        row = ttk.Frame(frame)
        row.pack(fill=tk.X, pady=(0, 4))
        ttk.Label(row, text="Language:").pack(side=tk.LEFT)
        self._language_var = tk.StringVar(value=_label_for(LANGUAGES, settings.language))
        language_combo = ttk.Combobox(
            row,
            textvariable=self._language_var,
            values=[label for _, label in LANGUAGES],
            state="readonly",
            width=20,
        )
        language_combo.pack(side=tk.LEFT, padx=(4, 16))
        language_combo.bind(
            "<<ComboboxSelected>>",
            lambda _e: self._set_option(
                "language", _value_for(LANGUAGES, self._language_var.get())
            ),
        )

        ttk.Label(row, text="AI Model:").pack(side=tk.LEFT)
        self._model_var = tk.StringVar(value=_label_for(MODELS, settings.model))
        model_combo = ttk.Combobox(
            row,
            textvariable=self._model_var,
            values=[label for _, label in MODELS],
            state="readonly",
            width=34,
        )
        model_combo.pack(side=tk.LEFT, padx=(4, 0))
        model_combo.bind(
            "<<ComboboxSelected>>",
            lambda _e: self._set_option(
                "model", _value_for(MODELS, self._model_var.get())
            ),
        )

        ttk.Label(frame, text="Custom Vocabulary:").pack(anchor=tk.W)
        self._vocab_text = tk.Text(frame, height=2, wrap=tk.WORD)
        self._vocab_text.insert("1.0", settings.custom_vocabulary)
        self._vocab_text.pack(fill=tk.X)
        self._vocab_text.bind("<KeyRelease>", self._on_vocabulary_changed)
        ttk.Label(
            frame,
            text="Help the AI recognize specific names, acronyms, or jargon. "
                 "Separate items with commas.",
            foreground="gray",
        ).pack(anchor=tk.W, pady=(0, 4))

        toggles = ttk.Frame(frame)
        toggles.pack(fill=tk.X)
        for index, (name, label) in enumerate(_TOGGLE_OPTIONS):
            var = tk.BooleanVar(value=getattr(settings, name))
            self._toggle_vars[name] = var
            ttk.Checkbutton(
                toggles,
                text=label,
                variable=var,
                command=lambda n=name, v=var: self._set_option(n, v.get()),
            ).grid(row=index // 3, column=index % 3, sticky=tk.W, padx=(0, 12))

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _set_option(self, name: str, value: object) -> None:
        self._controller.update_settings(
            self._controller.settings.with_option(name, value)
        )

    def _on_vocabulary_changed(self, _event: tk.Event) -> None:
        self._set_option("custom_vocabulary", self._vocab_text.get("1.0", "end-1c"))

    def _toggle_advanced(self) -> None:
        self._advanced_open = not self._advanced_open
        if self._advanced_open:
            self._advanced_frame.pack(fill=tk.X, pady=(0, _PAD), before=self._transcribe_btn)
        else:
            self._advanced_frame.pack_forget()

    def _browse_file(self) -> None:
        pattern = " ".join("*{}".format(ext) for ext in sorted(MEDIA_MIME_TYPES))
        path = filedialog.askopenfilename(
            title="Select Audio/Video File",
            filetypes=[("Audio/Video files", pattern), ("All files", "*.*")],
        )
        if not path:
            return
        if self.input_state.select_path(Path(path)):
            self._url_var.set("")
        self._refresh()

    def _on_url_changed(self, *_args: object) -> None:
        url = self._url_var.get()
        if url or self.input_state.file is None:
            self.input_state.set_url(url)
        self._refresh()

    def _submit(self) -> None:
        if self.input_state.can_submit:
            self._on_submit()

    def _refresh(self) -> None:
        state = self.input_state
        self._error_label.configure(text=state.error or "")
        if state.file is not None:
            self._file_label.configure(
                text="Selected: {}".format(state.file.name), foreground=""
            )
            self._browse_btn.configure(text="Change File")
        else:
            self._file_label.configure(text="No file selected", foreground="gray")
            self._browse_btn.configure(text="Upload File")
        self._transcribe_btn.configure(
            state=tk.NORMAL if state.can_submit else tk.DISABLED
        )

    def reset(self) -> None:
        """Clear the chosen source; settings are kept."""
        self.input_state.clear()
        self._url_var.set("")
        self._refresh()


class LoadingView(ttk.Frame):
    """Cycling status messages and a progress bar capped below 100%."""

    def __init__(self, parent: tk.Misc) -> None:
        super().__init__(parent, padding=_PAD * 3)
        self._ticker = LoadingTicker()
        self._after_id: Optional[str] = None

        ttk.Label(
            self, text="Transcribing", font=("TkDefaultFont", 18, "bold")
        ).pack(pady=(_PAD * 4, 4))
        self._source_label = ttk.Label(self, text="", foreground="gray")
        self._source_label.pack(pady=(0, _PAD))
        self._progress = ttk.Progressbar(
            self, orient=tk.HORIZONTAL, mode="determinate", maximum=100
        )
        self._progress.pack(fill=tk.X, pady=_PAD)
        self._message_label = ttk.Label(self, text="", foreground="gray")
        self._message_label.pack()

    def start(self, display_name: str) -> None:
        self._source_label.configure(text=display_name)
        self._ticker.start()
        self._tick()

    def stop(self) -> None:
        self._ticker.stop()
        if self._after_id is not None:
            self.after_cancel(self._after_id)
            self._after_id = None

    def _tick(self) -> None:
        message, progress = self._ticker.snapshot()
        self._message_label.configure(text=message)
        self._progress.configure(value=progress)
        self._after_id = self.after(_POLL_MS, self._tick)


class ResultView(ttk.Frame):
    """Transcript display with copy, go back, and transcribe again."""

    def __init__(
        self,
        parent: tk.Misc,
        on_go_back: Callable[[], None],
        on_transcribe_again: Callable[[], None],
    ) -> None:
        super().__init__(parent, padding=_PAD)
        self._feedback = CopyFeedback()
        self._transcript = ""
        self._copy_after_id: Optional[str] = None

        self._title_label = ttk.Label(self, text="", font=("TkDefaultFont", 16, "bold"))
        self._title_label.pack(pady=(0, _PAD))

        text_frame = ttk.Frame(self)
        text_frame.pack(fill=tk.BOTH, expand=True)
        self._text = tk.Text(text_frame, wrap=tk.WORD, state=tk.DISABLED)
        scrollbar = ttk.Scrollbar(text_frame, orient=tk.VERTICAL, command=self._text.yview)
        self._text.configure(yscrollcommand=scrollbar.set)
        scrollbar.pack(side=tk.RIGHT, fill=tk.Y)
        self._text.pack(fill=tk.BOTH, expand=True)

        btn_frame = ttk.Frame(self)
        btn_frame.pack(fill=tk.X, pady=(_PAD, 0))
        self._copy_btn = ttk.Button(btn_frame, text=COPY_LABEL, command=self._copy)
        self._copy_btn.pack(side=tk.LEFT)
        ttk.Button(
            btn_frame, text="Transcribe Again", command=on_transcribe_again
        ).pack(side=tk.RIGHT)
        ttk.Button(btn_frame, text="Go Back", command=on_go_back).pack(
            side=tk.RIGHT, padx=(0, _PAD)
        )

    def show(self, result: TranscriptionResult) -> None:
        self._cancel_copy_refresh()
        self._feedback = CopyFeedback()
        self._transcript = result.transcript
        self._title_label.configure(
            text=result.title,
            foreground=_SUCCESS_COLOR if result.is_success else _FAILURE_COLOR,
        )
        self._text.configure(state=tk.NORMAL)
        self._text.delete("1.0", tk.END)
        self._text.insert("1.0", result.transcript)
        self._text.configure(state=tk.DISABLED)
        self._copy_btn.configure(text=self._feedback.label)

    def _copy(self) -> None:
        try:
            self.clipboard_clear()
            self.clipboard_append(self._transcript)
            succeeded = True
        except tk.TclError:
            logger.exception("Failed to copy text")
            succeeded = False
        self._copy_btn.configure(text=self._feedback.record(succeeded))
        self._cancel_copy_refresh()
        self._copy_after_id = self.after(
            int(COPY_FEEDBACK_S * 1000) + _POLL_MS, self._refresh_copy_label
        )

    def _cancel_copy_refresh(self) -> None:
        if self._copy_after_id is not None:
            self.after_cancel(self._copy_after_id)
            self._copy_after_id = None

    def _refresh_copy_label(self) -> None:
        self._copy_after_id = None
        self._copy_btn.configure(text=self._feedback.label)


# ---------------------------------------------------------------------------
# Main GUI Application
# ---------------------------------------------------------------------------

class TranscriberApp:
    """Main tkinter application.

    HOW: Subscribes to the controller's screen changes and swaps the
    visible frame. Submitting starts a worker thread that runs
    controller.transcribe() under asyncio.run() and queues the result;
    _poll_result() hands it to controller.complete() on the main thread.
    """

    def __init__(self, root: tk.Tk, service: TranscriptionService) -> None:
        self._root = root
        self._root.title(_WINDOW_TITLE)
        self._root.minsize(_WINDOW_MIN_WIDTH, _WINDOW_MIN_HEIGHT)

        self._result_queue: queue.Queue = queue.Queue()
        self._worker_thread: Optional[threading.Thread] = None

        self._controller = ScreenController(service, on_change=self._show_screen)

        container = ttk.Frame(self._root)
        container.pack(fill=tk.BOTH, expand=True)
        self._main_view = MainView(container, self._controller, self._start_transcription)
        self._loading_view = LoadingView(container)
        self._result_view = ResultView(
            container,
            on_go_back=self._controller.go_back,
            on_transcribe_again=self._controller.transcribe_again,
        )
        self._show_screen(ScreenState.MAIN)

    def _show_screen(self, screen: ScreenState) -> None:
        for view in (self._main_view, self._loading_view, self._result_view):
            view.pack_forget()

        if screen is ScreenState.LOADING:
            self._loading_view.start(self._controller.source.display_name)
            self._loading_view.pack(fill=tk.BOTH, expand=True)
        elif screen is ScreenState.RESULT:
            self._loading_view.stop()
            self._result_view.show(self._controller.result)
            self._result_view.pack(fill=tk.BOTH, expand=True)
        else:
            self._main_view.reset()
            self._main_view.pack(fill=tk.BOTH, expand=True)

    def _start_transcription(self) -> None:
        source = self._main_view.input_state.source()
        if source is None:
            return
        self._controller.submit(source)

        self._worker_thread = threading.Thread(
            target=self._run_transcription_thread, daemon=True
        )
        self._worker_thread.start()
        self._root.after(_POLL_MS, self._poll_result)

    def _run_transcription_thread(self) -> None:
        """Run the async transcription; NEVER touch widgets from here."""
        try:
            result = asyncio.run(self._controller.transcribe())
        except Exception as e:
            logger.exception("Transcription worker crashed")
            result = TranscriptionResult.from_exception(e)
        self._result_queue.put(result)

    def _poll_result(self) -> None:
        try:
            result = self._result_queue.get_nowait()
        except queue.Empty:
            self._root.after(_POLL_MS, self._poll_result)
            return
        self._controller.complete(result)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main() -> None:
    """Launch the Tkinter GUI application.

    RULES:
    - This function blocks until the window is closed
    - Must be called from the main thread
    """
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    service = TranscriptionService(load_config())
    root = tk.Tk()
    TranscriberApp(root, service)
    root.mainloop()


if __name__ == "__main__":
    main()
