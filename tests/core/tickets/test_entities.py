"""
Testes Unitários para Entidades do Domínio de Tickets.

Testa as regras de negócio encapsuladas nas entidades,
incluindo validações, thread de mensagens e transições de estado.

Coverage:
- TicketEntity.criar(): Validações de criação
- TicketEntity.adicionar_mensagem(): Append na thread
- TicketEntity.atribuir_admin(): Atribuição força in_progress
- TicketEntity.alterar_status(): Sobrescrita validada
- TicketStatus / TicketPriority: Parsing de valores de wire
- Mensagem / Anexo: Serialização para o documento
"""

import pytest

from src.core.tickets.entities import (
    Anexo,
    Mensagem,
    TicketEntity,
    TicketPriority,
    TicketStatus,
)
from src.core.shared.exceptions import (
    InvalidStatusValueError,
    ValidationError,
)


def novo_ticket(**overrides) -> TicketEntity:
    dados = dict(
        titulo="Refund request",
        compra_id="P1",
        criador_id="u1",
        prioridade=TicketPriority.ALTA,
        mensagem_inicial="Item arrived damaged",
    )
    dados.update(overrides)
    return TicketEntity.criar(**dados)


class TestTicketEntityCriacao:
    """Testes para abertura de tickets."""

    def test_criar_ticket_valido(self):
        """Deve abrir ticket com uma mensagem do criador."""
        ticket = novo_ticket()

        assert len(ticket.id) == 36  # UUID
        assert ticket.titulo == "Refund request"
        assert ticket.compra_id == "P1"
        assert ticket.criador_id == "u1"
        assert ticket.prioridade == TicketPriority.ALTA
        assert ticket.status == TicketStatus.ABERTO
        assert ticket.admin_atribuido_id is None
        assert len(ticket.mensagens) == 1
        assert ticket.mensagem_inicial.remetente_id == "u1"
        assert ticket.mensagem_inicial.conteudo == "Item arrived damaged"

    def test_criar_ticket_com_anexos_na_mensagem_inicial(self):
        anexos = [Anexo("https://f/a.png", "ticket_attachments/a", "a.png")]

        ticket = novo_ticket(anexos=anexos)

        assert ticket.mensagem_inicial.anexos == anexos

    def test_timestamps_em_utc(self):
        ticket = novo_ticket()

        assert ticket.criado_em.tzinfo is not None
        assert ticket.atualizado_em == ticket.criado_em

    def test_titulo_e_compra_sao_normalizados(self):
        ticket = novo_ticket(titulo="  Troca de produto  ", compra_id=" P9 ")

        assert ticket.titulo == "Troca de produto"
        assert ticket.compra_id == "P9"

    @pytest.mark.parametrize("titulo", ["", "   ", "ab", "x" * 201])
    def test_titulo_invalido(self, titulo):
        with pytest.raises(ValidationError) as exc_info:
            novo_ticket(titulo=titulo)

        assert exc_info.value.field == "titulo"

    def test_compra_obrigatoria(self):
        with pytest.raises(ValidationError) as exc_info:
            novo_ticket(compra_id="")

        assert exc_info.value.field == "compra_id"

    def test_compra_longa_demais(self):
        with pytest.raises(ValidationError) as exc_info:
            novo_ticket(compra_id="P" * (TicketEntity.COMPRA_ID_MAX_LENGTH + 1))

        assert exc_info.value.field == "compra_id"

    def test_compra_no_limite(self):
        ticket = novo_ticket(compra_id="P" * TicketEntity.COMPRA_ID_MAX_LENGTH)

        assert len(ticket.compra_id) == TicketEntity.COMPRA_ID_MAX_LENGTH

    def test_criador_obrigatorio(self):
        with pytest.raises(ValidationError) as exc_info:
            novo_ticket(criador_id="")

        assert exc_info.value.field == "criador_id"

    def test_mensagem_inicial_obrigatoria(self):
        with pytest.raises(ValidationError) as exc_info:
            novo_ticket(mensagem_inicial="   ")

        assert exc_info.value.field == "conteudo"


class TestTicketEntityThread:
    """Testes para a thread de mensagens."""

    def test_adicionar_mensagem_no_final(self):
        ticket = novo_ticket()

        mensagem = ticket.adicionar_mensagem("a1", "Pode enviar uma foto?")

        assert len(ticket.mensagens) == 2
        assert ticket.mensagens[-1] is mensagem
        assert mensagem.remetente_id == "a1"

    def test_n_mensagens_preservam_ordem(self):
        ticket = novo_ticket()
        anteriores = list(ticket.mensagens)

        for i in range(5):
            ticket.adicionar_mensagem("u1", f"mensagem {i}")

        assert len(ticket.mensagens) == 6
        assert ticket.mensagens[:1] == anteriores
        assert [m.conteudo for m in ticket.mensagens[1:]] == [
            f"mensagem {i}" for i in range(5)
        ]

    def test_adicionar_mensagem_atualiza_timestamp(self):
        ticket = novo_ticket()
        antes = ticket.atualizado_em

        ticket.adicionar_mensagem("u1", "Alguma novidade?")

        assert ticket.atualizado_em >= antes

    def test_mensagem_vazia_rejeitada(self):
        ticket = novo_ticket()

        with pytest.raises(ValidationError):
            ticket.adicionar_mensagem("u1", "")

        assert len(ticket.mensagens) == 1

    def test_mensagem_muito_longa_rejeitada(self):
        ticket = novo_ticket()

        with pytest.raises(ValidationError):
            ticket.adicionar_mensagem("u1", "x" * (Mensagem.CONTEUDO_MAX_LENGTH + 1))


class TestTicketEntityAtribuicao:
    """Testes para atribuição de admin."""

    @pytest.mark.parametrize("status_inicial", list(TicketStatus))
    def test_atribuir_forca_em_progresso(self, status_inicial):
        """Qualquer status vira in_progress ao atribuir."""
        ticket = novo_ticket()
        ticket.status = status_inicial

        ticket.atribuir_admin("a1")

        assert ticket.admin_atribuido_id == "a1"
        assert ticket.status == TicketStatus.EM_PROGRESSO
        assert ticket.esta_atribuido

    def test_reatribuir_substitui_admin(self):
        ticket = novo_ticket()
        ticket.atribuir_admin("a1")

        ticket.atribuir_admin("a2")

        assert ticket.admin_atribuido_id == "a2"

    def test_admin_vazio_rejeitado(self):
        ticket = novo_ticket()

        with pytest.raises(ValidationError):
            ticket.atribuir_admin("")

        assert ticket.status == TicketStatus.ABERTO
        assert not ticket.esta_atribuido


class TestTicketEntityStatus:
    """Testes para alteração explícita de status."""

    @pytest.mark.parametrize("novo", list(TicketStatus))
    def test_qualquer_status_alcancavel(self, novo):
        ticket = novo_ticket()
        ticket.alterar_status(TicketStatus.FECHADO)

        ticket.alterar_status(novo)

        assert ticket.status == novo

    def test_valor_fora_do_enum_rejeitado(self):
        ticket = novo_ticket()

        with pytest.raises(InvalidStatusValueError):
            ticket.alterar_status("closed")

        assert ticket.status == TicketStatus.ABERTO


class TestEnums:
    """Parsing dos valores de wire."""

    def test_status_from_string(self):
        assert TicketStatus.from_string("in_progress") == TicketStatus.EM_PROGRESSO

    @pytest.mark.parametrize("valor", ["archived", "", None, "OPEN"])
    def test_status_invalido(self, valor):
        with pytest.raises(InvalidStatusValueError) as exc_info:
            TicketStatus.from_string(valor)

        assert exc_info.value.field == "status"

    def test_prioridade_from_string_normaliza(self):
        assert TicketPriority.from_string(" High ") == TicketPriority.ALTA

    @pytest.mark.parametrize("valor", ["", None, "urgent"])
    def test_prioridade_invalida(self, valor):
        with pytest.raises(ValidationError) as exc_info:
            TicketPriority.from_string(valor)

        assert exc_info.value.field == "prioridade"


class TestSerializacaoMensagem:
    """Formato da mensagem dentro do documento."""

    def test_mensagem_to_dict_from_dict(self):
        mensagem = Mensagem.nova(
            "u1",
            "Segue a nota",
            [Anexo("https://f/nota.pdf", "ticket_attachments/nota", "nota.pdf")],
        )

        data = mensagem.to_dict()
        restaurada = Mensagem.from_dict(data)

        assert data["anexos"][0]["nome_arquivo"] == "nota.pdf"
        assert isinstance(data["criado_em"], str)
        assert restaurada == mensagem


class TestTicketEntityIdentidade:

    def test_igualdade_por_id(self):
        ticket = novo_ticket()
        copia = TicketEntity(id=ticket.id, titulo="outro")

        assert ticket == copia
        assert hash(ticket) == hash(copia)
        assert ticket != novo_ticket()
