"""
Orquestração de upload de anexos.

Envia um lote de arquivos ao Attachment Store em paralelo e devolve
os anexos normalizados na mesma ordem da entrada, ou falha o lote
inteiro.

Política de falha (tudo ou nada):
- Qualquer upload com erro aborta o lote com UploadError
- Uploads ainda não iniciados são cancelados
- Uploads já concluídos NÃO são removidos do store; ficam órfãos
  na pasta de anexos e são registrados em log para limpeza posterior
"""

from concurrent.futures import ThreadPoolExecutor, FIRST_EXCEPTION, Future, wait
from typing import List, Sequence
import logging

from src.core.shared.exceptions import UploadError

from .dtos import ArquivoBruto
from .entities import Anexo
from .ports import AttachmentStore

logger = logging.getLogger(__name__)

PASTA_ANEXOS_PADRAO = "ticket_attachments"


class OrquestradorUploadAnexos:
    """
    Envia lotes de arquivos ao Attachment Store concorrentemente.

    Attributes:
        store: Adapter do Attachment Store
        pasta: Pasta/namespace reservado aos anexos de tickets
        max_workers: Limite de uploads simultâneos por lote

    Example:
        orquestrador = OrquestradorUploadAnexos(store)
        anexos = orquestrador.enviar([
            ArquivoBruto("foto.png", b"..."),
            ArquivoBruto("nota.pdf", b"..."),
        ])
        # anexos[0].nome_arquivo == "foto.png"
    """

    def __init__(
        self,
        store: AttachmentStore,
        pasta: str = PASTA_ANEXOS_PADRAO,
        max_workers: int = 4,
    ):
        if max_workers < 1:
            raise ValueError("max_workers deve ser >= 1")

        self.store = store
        self.pasta = pasta
        self.max_workers = max_workers

    def enviar(self, arquivos: Sequence[ArquivoBruto]) -> List[Anexo]:
        """
        Envia todos os arquivos e aguarda o lote completo.

        Args:
            arquivos: Arquivos na ordem em que devem aparecer na mensagem

        Returns:
            Anexos na mesma ordem da entrada (lista vazia se não há arquivos)

        Raises:
            UploadError: Se qualquer upload falhar
        """
        if not arquivos:
            return []

        executor = ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(arquivos)),
            thread_name_prefix="ticket-upload",
        )
        try:
            futures = [
                executor.submit(self._enviar_um, arquivo)
                for arquivo in arquivos
            ]
            done, _ = wait(futures, return_when=FIRST_EXCEPTION)

            falha = next(
                (f for f in futures if f in done and f.exception() is not None),
                None,
            )
            if falha is not None:
                self._abortar_lote(arquivos, futures, falha)

            anexos = [f.result() for f in futures]
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        logger.info(
            f"{len(anexos)} anexo(s) enviados para a pasta '{self.pasta}'"
        )
        return anexos

    def _enviar_um(self, arquivo: ArquivoBruto) -> Anexo:
        try:
            resultado = self.store.upload(arquivo, self.pasta)
        except UploadError:
            raise
        except Exception as e:
            raise UploadError(
                f"Falha ao enviar anexo '{arquivo.nome_arquivo}': {e}",
                nome_arquivo=arquivo.nome_arquivo,
            ) from e

        return Anexo(
            url=resultado.url,
            id_externo=resultado.id_externo,
            nome_arquivo=arquivo.nome_arquivo,
        )

    def _abortar_lote(
        self,
        arquivos: Sequence[ArquivoBruto],
        futures: List[Future],
        falha: Future,
    ) -> None:
        for future in futures:
            future.cancel()

        orfaos = [
            f.result().id_externo
            for f in futures
            if f.done() and not f.cancelled() and f.exception() is None
        ]
        if orfaos:
            logger.warning(
                f"Lote de {len(arquivos)} anexo(s) abortado; "
                f"uploads órfãos na pasta '{self.pasta}': {orfaos}"
            )

        raise falha.exception()
