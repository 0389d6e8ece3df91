# src/preingest/__init__.py
"""
Preingest — núcleo de ciclo de vida e agregação de status.

Este pacote implementa o backend de execução de uma etapa de pré-ingestão
de arquivo digital: cada contêiner entregue (`.tar`, `.tar.gz`, `.zip`)
é identificado por um GUID de sessão derivado do nome do arquivo, e cada
Step executado sobre ele produz um histórico auditável e notificações
em tempo real.

Subpacotes:
    - core           → identidade, erros, configuração, contrato de Step,
                       controlador de ciclo de vida e snapshots JSON
    - persistence    → store relacional (Actions, States, Messages, Plan)
    - notifications  → hub de viewers, cliente do worker service e outbox
    - status         → agregador de status, plano e registry de coleções
    - steps          → Steps concretos mínimos (settings, checksum, unpack)
"""

__version__ = "0.1.0"
