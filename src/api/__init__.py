"""API — camada de borda HTTP e adapters do Slack.

Responsabilidades:
- Receber webhooks legados e slash commands
- Validar assinaturas e payloads
- Traduzir respostas da Web API do Slack para resultados internos

Subpastas:
- connectors/: adapters HTTP por plataforma (slack/)
- middleware/: access log com correlation_id e máscara de tokens
- routes/: endpoints HTTP (relay, slash commands, health)

NÃO PODE conter: regras de ciclo de vida de tokens nem reconciliação.
"""
