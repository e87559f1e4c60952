"""Compile transcription settings into a natural-language prompt.

WHY: Gemini takes its instructions as plain text alongside the media.
Every user option therefore has to become a sentence the model reads.

HOW: Starts from a base sentence naming the language, then appends one
clause per option in a fixed order. Punctuation and output format are
always stated; the other clauses appear only when their option is on.

RULES:
- Clause order is fixed: punctuation, speakers, timestamps, profanity,
  vocabulary, output format, summary
- Punctuation is the one option whose "off" state is stated explicitly
- Vocabulary is trimmed first; whitespace-only vocabulary adds nothing
- The summary clause follows a blank line, after everything else
"""

from __future__ import annotations

from ktm_transcriber.core.settings import Settings

PUNCTUATION_ON = "Ensure proper punctuation is used throughout the transcript."
PUNCTUATION_OFF = "Do not add any punctuation."
DIARIZATION_CLAUSE = (
    "Identify different speakers and label them clearly "
    "(e.g., Speaker 1:, Speaker 2:)."
)
TIMESTAMP_CLAUSE = (
    "Include timestamps in the format [HH:MM:SS] at meaningful intervals "
    "or speaker changes."
)
PROFANITY_CLAUSE = (
    "If any profanity is present, censor it using asterisks (e.g., f***)."
)
VOCABULARY_CLAUSE = (
    "Pay special attention to the following custom words, names, or "
    "acronyms and ensure they are transcribed correctly: {vocabulary}."
)
OUTPUT_FORMAT_CLAUSE = "The output should be in well-structured Markdown format."
SUMMARY_CLAUSE = (
    "After the full transcription, provide a concise summary of the "
    "content under a '## Summary' heading."
)


def build_prompt(settings: Settings) -> str:
    """Return the instruction text sent to the model for these settings."""
    clauses = [
        "Transcribe the following audio/video content. "
        "The primary language is {}.".format(settings.language)
    ]

    clauses.append(
        PUNCTUATION_ON if settings.enable_punctuation else PUNCTUATION_OFF
    )
    if settings.enable_diarization:
        clauses.append(DIARIZATION_CLAUSE)
    if settings.add_timestamps:
        clauses.append(TIMESTAMP_CLAUSE)
    if settings.filter_profanity:
        clauses.append(PROFANITY_CLAUSE)

    vocabulary = settings.custom_vocabulary.strip()
    if vocabulary:
        clauses.append(VOCABULARY_CLAUSE.format(vocabulary=vocabulary))

    clauses.append(OUTPUT_FORMAT_CLAUSE)

    prompt = " ".join(clauses)
    if settings.enable_summarization:
        prompt += "\n\n" + SUMMARY_CLAUSE
    return prompt
