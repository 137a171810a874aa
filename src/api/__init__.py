"""API — camada de borda e adapters externos.

Responsabilidades:
- Falar com a Salesforce (login SOAP, Streaming API/CometD)
- Normalizar change events para modelos internos
- Expor a superfície de leitura HTTP (eventos recentes, health)

Subpastas:
- connectors/: adapters HTTP (Salesforce, cliente HTTP base)
- normalizers/: conversão de payloads externos → modelos internos
- routes/: endpoints HTTP (events, health)

NÃO PODE conter: FSM, política de reconexão, orquestração do pipeline.
"""
