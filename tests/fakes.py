"""
Fakes compartilhados entre as suítes de teste.
"""

import threading
from typing import List, Optional

from src.core.tickets.dtos import ArquivoBruto
from src.core.tickets.ports import UploadResult


class FakeAttachmentStore:
    """
    Attachment Store fake.

    - Registra cada upload (thread-safe)
    - Falha para nomes em `falhar_em`
    - Com `barreira`, cada upload espera os demais chegarem
      (só termina se os uploads rodarem em paralelo)
    """

    def __init__(
        self,
        falhar_em: Optional[set] = None,
        barreira: Optional[threading.Barrier] = None,
    ):
        self.falhar_em = falhar_em or set()
        self.barreira = barreira
        self.enviados: List[str] = []
        self.pastas: List[str] = []
        self._lock = threading.Lock()

    def upload(self, arquivo: ArquivoBruto, pasta: str) -> UploadResult:
        if self.barreira is not None:
            self.barreira.wait()

        if arquivo.nome_arquivo in self.falhar_em:
            raise ConnectionError(f"store recusou {arquivo.nome_arquivo}")

        with self._lock:
            self.enviados.append(arquivo.nome_arquivo)
            self.pastas.append(pasta)

        return UploadResult(
            url=f"https://files.test/{pasta}/{arquivo.nome_arquivo}",
            id_externo=f"{pasta}/{arquivo.nome_arquivo}",
        )


def arquivo(nome: str, conteudo: bytes = b"conteudo") -> ArquivoBruto:
    """Atalho para montar um ArquivoBruto."""
    return ArquivoBruto(nome_arquivo=nome, conteudo=conteudo, content_type="text/plain")
