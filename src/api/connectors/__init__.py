"""Connectors — adapters de borda para APIs externas.

Estrutura:
- http_base.py: cliente HTTP de saída (webhook)
- salesforce/: login SOAP e Streaming API (CometD com replay)
"""

__all__: list[str] = []
