"""Splitting long scripts into provider-sized chunks."""

import re

SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+")


def byte_length(text: str) -> int:
    return len(text.encode("utf-8"))


def split_text_into_chunks(text: str, max_bytes: int) -> list[str]:
    """
    Split ``text`` into chunks of at most ``max_bytes`` UTF-8 bytes.

    Chunks break at sentence boundaries; a sentence that alone exceeds the
    budget is broken at spaces instead. Joining the chunks with single
    spaces gives back every word of the input, in order.
    """
    chunks: list[str] = []
    current = ""

    for sentence in SENTENCE_BOUNDARY_RE.split(text):
        candidate = f"{current} {sentence}" if current else sentence

        if byte_length(candidate) <= max_bytes:
            current = candidate
            continue

        if current:
            chunks.append(current)
            current = sentence
            if byte_length(current) <= max_bytes:
                continue
            # The sentence that didn't fit is too big on its own
            sentence, current = current, ""

        word_chunk = ""
        for word in sentence.split(" "):
            candidate = f"{word_chunk} {word}" if word_chunk else word
            if byte_length(candidate) > max_bytes and word_chunk:
                chunks.append(word_chunk)
                word_chunk = word
            else:
                word_chunk = candidate
        current = word_chunk

    if current:
        chunks.append(current)

    return chunks
