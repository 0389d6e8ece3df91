# tests/test_smoke.py
"""
Testes de sanidade estrutural (smoke tests) do núcleo de pré-ingestão.

Este módulo contém testes mínimos cujo único objetivo é garantir que:
- o pacote `preingest` é importável a partir do layout src/
- o ambiente de testes (pytest) está funcional
- os Steps padrão estão registrados

Invariantes:
    - Estes testes devem sempre passar em um setup correto
    - Não dependem de banco, filesystem ou rede

Limites explícitos:
    - Não testar lógica de negócio
    - Não acumular asserts funcionais
"""

import preingest
from preingest.steps import default_registry


def test_smoke():
    """
    Smoke test mínimo do repositório.

    Valida que o pacote pode ser importado e que o registry padrão
    conhece os Steps embarcados. Não valida ciclo de vida nem persistência.
    """
    assert preingest.__version__
    assert default_registry().names() == ["SettingsHandler", "ContainerChecksumHandler", "UnpackTarHandler"]
