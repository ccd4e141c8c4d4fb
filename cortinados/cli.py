# cortinados/cli.py
"""
Comandos de terminal (flask <comando>):

    flask init-db                      cria as tabelas direto (dev/teste)
    flask criar-gestor --nome ... --email ... --senha ...
"""
import click

from cortinados import db
from cortinados.services import usuario_service
from cortinados.services.erros import ErroDominio


def registrar_comandos(app) -> None:
    @app.cli.command("init-db")
    def init_db():
        """Cria as tabelas sem passar pelas migrations."""
        db.create_all()
        click.echo("Tabelas criadas.")

    @app.cli.command("criar-gestor")
    @click.option("--nome", required=True)
    @click.option("--email", required=True)
    @click.option("--senha", required=True, prompt=True, hide_input=True)
    def criar_gestor(nome, email, senha):
        """Cria o primeiro gestor (os demais usuários são criados pela API)."""
        try:
            usuario = usuario_service.criar_usuario(
                {"nome": nome, "email": email, "senha": senha, "role": "gestor"}
            )
        except ErroDominio as e:
            db.session.rollback()
            raise click.ClickException(e.mensagem)
        click.echo(f"Gestor criado: {usuario.email} (id={usuario.id})")
