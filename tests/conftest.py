# tests/conftest.py
"""
Fixtures compartilhados para testes do núcleo de pré-ingestão.

Este módulo define fixtures reutilizáveis que fornecem:
- uma pasta de dados isolada (tmp_path) com contêineres reais (.tar/.zip)
- configuração tipada apontando para um SQLite em arquivo temporário
- um `ServiceContext` completo com destinos de notificação gravadores
- um Step mínimo controlável para testes de ciclo de vida

Decisões arquiteturais:
    - Nenhuma fixture acessa rede; o worker service é um gravador em memória
    - O outbox é inline, de modo que as notificações estão disponíveis
      assim que `execute()` retorna
    - Contêineres são criados com `tarfile`/`zipfile` da biblioteca padrão

Invariantes:
    - Cada teste recebe banco e pasta de dados próprios
    - Fixtures não dependem de ordem de execução

Limites explícitos:
    - Não substituem testes de integração com HTTP real
"""

import io
import tarfile
import zipfile
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

from preingest.core.config.settings import AppSettings
from preingest.core.identity import session_guid_for
from preingest.core.lifecycle.context import ServiceContext
from preingest.core.lifecycle.controller import LifecycleController
from preingest.core.pipeline.types import ActionResult
from preingest.notifications.outbox import NotificationOutbox
from preingest.persistence.database import DatabaseManager
from preingest.persistence.health import AuditHealth
from preingest.persistence.status_store import StatusStore
from preingest.status.registry import CollectionRegistry


class RecordingSink:
    """Destino de notificação que apenas grava as chamadas recebidas."""

    def __init__(self):
        self.calls: List[Tuple[str, tuple]] = []

    def send(self, method, *args):
        self.calls.append((method, args))

    def methods(self) -> List[str]:
        return [m for m, _ in self.calls]


def _write_tar(path: Path, members: Dict[str, bytes]) -> None:
    mode = "w:gz" if path.name.lower().endswith(".gz") else "w"
    with tarfile.open(path, mode) as tar:
        for name, content in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            tar.addfile(info, io.BytesIO(content))


def _write_zip(path: Path, members: Dict[str, bytes]) -> None:
    with zipfile.ZipFile(path, "w") as zf:
        for name, content in members.items():
            zf.writestr(name, content)


@pytest.fixture
def data_folder(tmp_path: Path) -> Path:
    folder = tmp_path / "data"
    folder.mkdir()
    return folder


@pytest.fixture
def make_container(data_folder: Path):
    """
    Fábrica de contêineres na pasta de dados.

    Cria o arquivo com os membros informados e, por padrão, a pasta de
    trabalho da sessão (como o registry faz na primeira listagem).
    Retorna `(caminho_do_contêiner, guid_da_sessão)`.
    """

    def _make(
        name: str = "collection.tar",
        members: Optional[Dict[str, bytes]] = None,
        *,
        with_session_folder: bool = True,
    ):
        members = members if members is not None else {"collection/record.metadata": b"<topx/>"}
        path = data_folder / name
        if name.lower().endswith(".zip"):
            _write_zip(path, members)
        else:
            _write_tar(path, members)
        guid = session_guid_for(name)
        if with_session_folder:
            (data_folder / str(guid)).mkdir(exist_ok=True)
        return path, guid

    return _make


@pytest.fixture
def settings(data_folder: Path, tmp_path: Path) -> AppSettings:
    return AppSettings(
        data_folder_name=data_folder,
        database_url=f"sqlite:///{(tmp_path / 'status.db').as_posix()}",
    )


@pytest.fixture
def store(settings: AppSettings) -> StatusStore:
    db = DatabaseManager(settings.database_url)
    db.create_tables()
    yield StatusStore(db)
    db.dispose()


@pytest.fixture
def ctx(settings: AppSettings, store: StatusStore) -> ServiceContext:
    """
    Contexto de serviços completo para testes.

    `ctx.viewers` e `ctx.worker` são `RecordingSink`; o outbox é inline.
    """
    health = AuditHealth()
    return ServiceContext(
        settings=settings,
        store=store,
        collections=CollectionRegistry(settings.data_folder_name, store, health),
        viewers=RecordingSink(),
        worker=RecordingSink(),
        outbox=NotificationOutbox("inline"),
        health=health,
    )


class ScriptedStep(LifecycleController):
    """Step de teste: executa o comportamento passado no construtor."""

    name = "ScriptedHandler"

    def __init__(self, ctx, behaviour=None, *, progress_updates: int = 0, requires_metadata: bool = False):
        super().__init__(ctx)
        self.behaviour = behaviour
        self.progress_updates = progress_updates
        self.requires_metadata = requires_metadata

    def run(self, model):
        for i in range(self.progress_updates):
            self.progress(model, f"step {i + 1}")
        if self.behaviour is not None:
            self.behaviour(model)
        if model.action_result is None:
            model.action_result = ActionResult.SUCCESS
            model.summary.record(accepted=1, rejected=0)


@pytest.fixture
def scripted_step():
    return ScriptedStep
