# cortinados/routes/api_routes/usuarios_api.py
from flask import Blueprint, request
from flask_login import current_user, login_required

from cortinados.services import usuario_service
from cortinados.services.permissoes import tem_permissao
from cortinados.utils.api_utils import erro_api, json_body, parse_bool, resposta_api
from cortinados.utils.auth_utils import role_required

usuarios_api_bp = Blueprint("usuarios_api_bp", __name__, url_prefix="/api/users")


@usuarios_api_bp.get("")
@role_required("gestor")
def listar():
    usuarios = usuario_service.listar_usuarios(
        role=request.args.get("role") or None,
        ativo=parse_bool(request.args.get("ativo")),
    )
    return resposta_api([u.as_dict() for u in usuarios], total=len(usuarios))


@usuarios_api_bp.post("")
@role_required("gestor")
def criar():
    usuario = usuario_service.criar_usuario(json_body())
    return resposta_api(usuario.as_dict(), "Usuário criado com sucesso", 201)


@usuarios_api_bp.get("/<int:usuario_id>")
@role_required("gestor")
def detalhe(usuario_id: int):
    return resposta_api(usuario_service.obter_usuario(usuario_id).as_dict())


@usuarios_api_bp.put("/<int:usuario_id>")
@role_required("gestor")
def atualizar(usuario_id: int):
    body = json_body()
    # O gestor não pode se trancar fora do sistema
    if usuario_id == current_user.id:
        if "ativo" in body and usuario_service.parse_ativo(body["ativo"]) is False:
            return erro_api("Não é possível desativar o próprio usuário", 400)
        if "role" in body and body["role"] != current_user.role:
            return erro_api("Não é possível alterar o próprio role", 400)
    usuario = usuario_service.atualizar_usuario(usuario_id, body)
    return resposta_api(usuario.as_dict(), "Usuário atualizado com sucesso")


@usuarios_api_bp.delete("/<int:usuario_id>")
@role_required("gestor")
def desativar(usuario_id: int):
    if usuario_id == current_user.id:
        return erro_api("Não é possível desativar o próprio usuário", 400)
    usuario = usuario_service.desativar_usuario(usuario_id)
    return resposta_api(usuario.as_dict(), "Usuário desativado com sucesso")


@usuarios_api_bp.put("/<int:usuario_id>/senha")
@login_required
def alterar_senha(usuario_id: int):
    # O próprio usuário ou um gestor
    if usuario_id != current_user.id and not tem_permissao(current_user, ("gestor",)):
        return erro_api("Acesso não autorizado", 403)

    body = json_body()
    nova = body.get("novaSenha") or body.get("senha")
    if not nova:
        return erro_api("Nova senha é obrigatória", 400)

    # Quem troca a própria senha confirma a atual
    if usuario_id == current_user.id and current_user.role != "gestor":
        if not current_user.check_password(body.get("senhaAtual") or ""):
            return erro_api("Senha atual incorreta", 400)

    usuario_service.atualizar_senha(usuario_id, nova)
    return resposta_api(message="Senha alterada com sucesso")
