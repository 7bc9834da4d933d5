"""Slash commands do Slack atendidos pelo relay.

Os nomes precisam bater com os comandos cadastrados no app do Slack.
"""

from __future__ import annotations

CMD_SHOW = "/relay-show"
CMD_GENERATE = "/relay-generate"
CMD_REGENERATE = "/relay-regenerate"
CMD_REVOKE = "/relay-revoke"
CMD_REVOKE_RENAMED = "/relay-revoke-renamed"

# revoke-renamed espera exatamente "<old_channel_name> <token>"
REVOKE_RENAMED_ARG_COUNT = 2
