"""Parse do corpo form-urlencoded de slash commands do Slack."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import parse_qs

REQUIRED_FIELDS = ("command", "channel_id", "channel_name")


class SlashCommandParseError(ValueError):
    """Corpo do slash command sem campos obrigatórios."""


@dataclass(frozen=True, slots=True)
class SlashCommandRequest:
    """Campos do slash command usados pelo relay.

    channel_name é o nome enviado pelo Slack; para canais privados antigos
    pode estar errado, por isso o nome real é resolvido via conversations.info.
    """

    command: str
    channel_id: str
    channel_name: str
    text: str = ""


def parse_slash_command(raw_body: bytes) -> SlashCommandRequest:
    """Extrai command, channel_id, channel_name e text do corpo.

    Raises:
        SlashCommandParseError: Corpo ilegível ou sem campos obrigatórios.
    """
    try:
        fields = parse_qs(raw_body.decode("utf-8"), keep_blank_values=True)
    except UnicodeDecodeError as exc:
        raise SlashCommandParseError("invalid_encoding") from exc

    missing = [name for name in REQUIRED_FIELDS if not (fields.get(name) or [""])[0]]
    if missing:
        raise SlashCommandParseError(f"missing_fields: {', '.join(missing)}")

    return SlashCommandRequest(
        command=fields["command"][0].strip(),
        channel_id=fields["channel_id"][0],
        channel_name=fields["channel_name"][0],
        text=(fields.get("text") or [""])[0].strip(),
    )
