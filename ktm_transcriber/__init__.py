"""KTM Transcriber: audio/video transcription through Gemini.

WHY: Turning a recording into readable text should take a file, a few
options, and one button. The app collects those, compiles the options
into a prompt, sends prompt and media to Gemini, and shows the result.

HOW: Three layers. api/ talks HTTP to Gemini, service.py classifies
outcomes and hosts the simulated URL path, core/ holds the settings,
prompt compiler, and screen state machine. gui.py renders the three
screens with tkinter.

RULES:
- The service receives its configuration explicitly (AppConfig)
- Every failure path ends in the same TranscriptionResult shape
"""

__version__ = "0.1.0"
