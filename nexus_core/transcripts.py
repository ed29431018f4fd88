"""Plain-text ticket transcripts."""

from __future__ import annotations

from datetime import datetime
from io import BytesIO
from typing import Any, Iterable, Optional

import discord

from .constants import TRANSCRIPT_MESSAGE_LIMIT, TRANSCRIPT_SEPARATOR
from .utils.timestamps import local_timestamp


async def fetch_transcript_messages(
    channel: discord.abc.Messageable, limit: int = TRANSCRIPT_MESSAGE_LIMIT
) -> list[discord.Message]:
    """Return up to ``limit`` most recent messages, oldest first."""
    messages = [message async for message in channel.history(limit=limit)]
    messages.reverse()
    return messages


def render_transcript(
    channel_name: str,
    messages: Iterable[Any],
    *,
    generated_at: Optional[datetime] = None,
) -> str:
    """Render messages (already in chronological order) as a text transcript."""
    generated_at = generated_at or datetime.now().astimezone()
    lines = [
        f"TRANSKRYPCJA ZAMÓWIENIA: {channel_name.upper()}",
        f"Wygenerowano: {local_timestamp(generated_at)}",
        TRANSCRIPT_SEPARATOR,
        "",
    ]
    for message in messages:
        lines.append(f"[{local_timestamp(message.created_at)}] {message.author}: {message.content}")
        if message.embeds:
            lines.append(f"[Embed] {message.embeds[0].title or 'No Title'}")
    return "\n".join(lines) + "\n"


def transcript_file(channel_name: str, transcript: str) -> discord.File:
    """Wrap a transcript as an attachment. A File can only be sent once."""
    return discord.File(BytesIO(transcript.encode("utf-8")), filename=f"backup-{channel_name}.txt")
