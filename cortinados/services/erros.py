"""Erros de regra de negócio do sistema de cortinados.

Os serviços levantam estas exceções; a factory converte cada uma em
resposta JSON padronizada com o ``status_code`` correspondente.
"""


class ErroDominio(Exception):
    """Erro de regra de negócio."""

    status_code = 400

    def __init__(self, mensagem: str, status_code: int = None):
        super().__init__(mensagem)
        self.mensagem = mensagem
        if status_code is not None:
            self.status_code = status_code


class ErroValidacao(ErroDominio):
    status_code = 400


class PermissaoNegada(ErroDominio):
    status_code = 403


class NaoEncontrado(ErroDominio):
    status_code = 404


class Conflito(ErroDominio):
    status_code = 409
