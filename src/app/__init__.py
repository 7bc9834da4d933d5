"""App — coração do sistema: casos de uso, serviços e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- use_cases/: relay de webhooks e slash commands
- services/: ciclo de vida de tokens e reconciliação
- domain/: registro de credencial por canal
- infra/: implementações concretas de IO (stores, HTTP, secrets)
- protocols/: contratos/interfaces
- jobs/: execuções agendadas (reconciliação)
- observability/: correlation_id e métricas via logs
- constants/: constantes da aplicação

Padrão: app executa; api adapta; utils apoia.
"""
