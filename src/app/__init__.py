"""App — orquestração do pipeline CDC e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- subscriptions/: SubscriptionManager (ciclo de vida da assinatura)
- services/: serviços de aplicação (encaminhamento para webhook)
- infra/: implementações concretas (buffer de eventos, tasks em background)
- protocols/: contratos/interfaces
- observability/: correlation_id e métricas via log estruturado

Padrão: app executa; api adapta; fsm governa; utils apoia.
"""
