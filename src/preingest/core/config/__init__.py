# src/preingest/core/config/__init__.py

"""
Camada de configuração.

Responsabilidades do pacote:
    - Carregamento de arquivos de configuração (defaults + overrides locais)
    - Resolução da configuração final via deep-merge determinístico
    - Conversão para `AppSettings` tipado

Limites explícitos:
    - Não lê variáveis de ambiente
    - Não interage com Steps ou com o store diretamente
"""

from .errors import ConfigError
from .loader import load_config
from .settings import AppSettings, load_settings

__all__ = ["AppSettings", "ConfigError", "load_config", "load_settings"]
