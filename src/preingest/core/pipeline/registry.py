# src/preingest/core/pipeline/registry.py
"""
Registro de tipos de Step.

Mapeia o nome de um tipo de Step (ex.: "UnpackTarHandler") para a
fábrica que cria uma instância ligada a um `ServiceContext`. O registro
é usado pelo runner e pelo worker para instanciar Steps por nome.

Invariantes:
    - Cada nome é registrado uma única vez
    - A ordem de registro é preservada em `names()`
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from ..exceptions import StepConfigurationError

StepFactory = Callable[[Any], Any]


class DuplicateStepNameError(ValueError):
    """Tentativa de registrar duas fábricas com o mesmo nome de Step."""


@dataclass
class StepRegistry:
    _factories: Dict[str, StepFactory] = field(default_factory=dict, init=False, repr=False)
    _order: List[str] = field(default_factory=list, init=False, repr=False)

    def add(self, name: str, factory: StepFactory) -> None:
        if not isinstance(name, str) or not name.strip():
            raise ValueError("step name must be a non-empty string")

        if name in self._factories:
            raise DuplicateStepNameError(f"Duplicate step name: {name}")

        self._factories[name] = factory
        self._order.append(name)

    def create(self, name: str, ctx: Any) -> Any:
        factory = self._factories.get(name)
        if factory is None:
            raise StepConfigurationError(
                f"Unknown step type: {name}",
                details={"step": name, "known": list(self._order)},
                hint="Registre o Step no StepRegistry antes de executá-lo",
            )
        return factory(ctx)

    def names(self) -> List[str]:
        return list(self._order)

    def __contains__(self, name: object) -> bool:
        return name in self._factories
