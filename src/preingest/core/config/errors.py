# src/preingest/core/config/errors.py
"""
Exceções da camada de configuração.

As exceções aqui definidas representam violações estruturais da
configuração (arquivo ausente, formato desconhecido, raiz inválida,
conflito de tipos no merge, valor fora do domínio permitido) e são
tratadas como falhas fatais na inicialização do serviço.

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma exceção representa erro de execução de Step
"""


class ConfigError(Exception):
    """
    Exceção base para erros de configuração.

    Permite captura genérica de falhas de configuração e distinção
    clara entre falhas de bootstrap e falhas de execução de Steps.
    """


class DefaultsNotFoundError(ConfigError):
    """
    O arquivo de configuração base (defaults) não existe no caminho
    informado. Sem defaults não existe configuração efetiva válida.
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Formato de arquivo não suportado pelo loader.

    Formatos suportados:
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """O conteúdo raiz da configuração não é um dicionário."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge.

    Exemplo:
        - base:     {"notifications": {"mode": "inline"}}
        - override: {"notifications": "background"}
    """


class InvalidConfigValueError(ConfigError):
    """Valor presente na configuração fora do domínio aceito."""
