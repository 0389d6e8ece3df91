# src/preingest/core/__init__.py
"""
Núcleo do serviço de pré-ingestão.

Contém identidade de sessão, erros e exceções, configuração, logging,
serialização camelCase, o contrato de Step, o controlador de ciclo de
vida e os snapshots JSON de resultado.
"""
