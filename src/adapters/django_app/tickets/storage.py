"""
Attachment Store - Cloudinary.

Implementa o port AttachmentStore com o SDK oficial do Cloudinary
(`cloudinary.uploader.upload`), com `resource_type="auto"` para
aceitar imagens, PDFs e demais arquivos.

As credenciais vão em cada chamada em vez de `cloudinary.config()`
global: o store é usado em paralelo pelo orquestrador de uploads.
A resposta traz `secure_url` (recuperação) e `public_id`
(gestão/remoção).
"""

import io
import logging

import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from src.core.shared.exceptions import UploadError
from src.core.tickets.dtos import ArquivoBruto
from src.core.tickets.ports import UploadResult

logger = logging.getLogger(__name__)


class CloudinaryAttachmentStore:
    """
    Cliente de upload do Cloudinary.

    Example:
        store = CloudinaryAttachmentStore("demo", "key", "secret")
        resultado = store.upload(ArquivoBruto("nota.pdf", b"..."), "ticket_attachments")
        resultado.url  # https://res.cloudinary.com/demo/...
    """

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        timeout: float = 30,
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.timeout = timeout

    @property
    def configurado(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def upload(self, arquivo: ArquivoBruto, pasta: str) -> UploadResult:
        """
        Envia um arquivo para a pasta indicada.

        Raises:
            UploadError: Se credenciais ausentes, erro do Cloudinary ou
                resposta sem url/public_id
        """
        if not self.configurado:
            raise UploadError(
                "Cloudinary não configurado",
                nome_arquivo=arquivo.nome_arquivo,
            )

        try:
            resposta = cloudinary.uploader.upload(
                io.BytesIO(arquivo.conteudo),
                folder=pasta,
                resource_type="auto",
                filename=arquivo.nome_arquivo,
                cloud_name=self.cloud_name,
                api_key=self.api_key,
                api_secret=self.api_secret,
                timeout=self.timeout,
            )
        except CloudinaryError as e:
            raise UploadError(
                f"Cloudinary recusou '{arquivo.nome_arquivo}': {e}",
                nome_arquivo=arquivo.nome_arquivo,
            ) from e

        url = resposta.get("secure_url") or resposta.get("url")
        public_id = resposta.get("public_id")

        if not url or not public_id:
            raise UploadError(
                f"Cloudinary não retornou url/public_id para '{arquivo.nome_arquivo}'",
                nome_arquivo=arquivo.nome_arquivo,
            )

        logger.debug(f"Uploaded {arquivo.nome_arquivo} ({arquivo.tamanho} bytes) -> {public_id}")

        return UploadResult(url=url, id_externo=public_id)
