from cortinados import db
from cortinados.models import Usuario

from conftest import SENHA, login


def test_login_e_me(client, usuarios):
    resp = login(client, "gestor@cortinados.pt")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["data"]["role"] == "gestor"
    assert "password_hash" not in body["data"]
    assert "timestamp" in body

    me = client.get("/api/auth/me").get_json()
    assert me["data"]["email"] == "gestor@cortinados.pt"


def test_login_campos_obrigatorios(client, usuarios):
    resp = client.post("/api/auth/login", json={"email": "gestor@cortinados.pt"})
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_login_senha_errada(client, usuarios):
    resp = login(client, "gestor@cortinados.pt", "errada")
    assert resp.status_code == 401


def test_api_sem_login_retorna_401(client):
    resp = client.get("/api/projects")
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Não autenticado"


def test_logout(client, usuarios):
    login(client, "medidor@cortinados.pt")
    assert client.post("/api/auth/logout").status_code == 200
    assert client.get("/api/auth/me").status_code == 401


def test_gestor_cria_e_lista_usuarios(como):
    gestor = como("gestor")
    resp = gestor.post("/api/users", json={
        "nome": "Rui Instalador",
        "email": "RUI@Cortinados.pt",
        "senha": "abcdef",
        "role": "instalador",
        "telefone": "912 345 678",
    })
    assert resp.status_code == 201
    assert resp.get_json()["data"]["email"] == "rui@cortinados.pt"

    lista = gestor.get("/api/users?role=instalador").get_json()
    assert lista["total"] == 2
    assert {u["email"] for u in lista["data"]} == {"rui@cortinados.pt", "instalador@cortinados.pt"}


def test_email_duplicado(como):
    resp = como("gestor").post("/api/users", json={
        "nome": "Outro", "email": "medidor@cortinados.pt", "senha": "abcdef", "role": "medidor",
    })
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Email já está em uso"


def test_validacoes_de_usuario(como):
    gestor = como("gestor")
    base = {"nome": "Novo", "email": "novo@cortinados.pt", "senha": "abcdef", "role": "medidor"}

    resp = gestor.post("/api/users", json={**base, "senha": "123"})
    assert resp.get_json()["message"] == "Senha deve ter pelo menos 6 caracteres"

    resp = gestor.post("/api/users", json={**base, "role": "chefe"})
    assert resp.get_json()["message"] == "Role inválido"

    resp = gestor.post("/api/users", json={**base, "telefone": "12345"})
    assert resp.get_json()["message"] == "Telefone inválido"

    resp = gestor.post("/api/users", json={"nome": "Sem email"})
    assert resp.get_json()["message"] == "Nome, email, senha e role são obrigatórios"


def test_usuarios_so_para_gestor(como):
    assert como("medidor").get("/api/users").status_code == 403
    assert como("logistica").post("/api/users", json={}).status_code == 403


def test_soft_delete_impede_login(app, client, como, usuarios):
    gestor = como("gestor")
    uid = usuarios["medidor"]["id"]
    resp = gestor.delete(f"/api/users/{uid}")
    assert resp.status_code == 200
    assert resp.get_json()["data"]["ativo"] is False

    with app.app_context():
        assert db.session.get(Usuario, uid) is not None

    assert login(client, "medidor@cortinados.pt").status_code == 401

    ativos = gestor.get("/api/users?ativo=true").get_json()["data"]
    assert "medidor@cortinados.pt" not in {u["email"] for u in ativos}


def test_atualizacao_parcial(como, usuarios):
    gestor = como("gestor")
    uid = usuarios["logistica"]["id"]
    resp = gestor.put(f"/api/users/{uid}", json={"empresa": "Transportes Silva"})
    data = resp.get_json()["data"]
    assert data["empresa"] == "Transportes Silva"
    assert data["role"] == "logistica"


def test_troca_de_senha_pelo_proprio_usuario(app, como, usuarios):
    medidor = como("medidor")
    uid = usuarios["medidor"]["id"]

    resp = medidor.put(f"/api/users/{uid}/senha", json={"senhaAtual": "x", "novaSenha": "nova-senha"})
    assert resp.status_code == 400

    resp = medidor.put(f"/api/users/{uid}/senha", json={"senhaAtual": SENHA, "novaSenha": "nova-senha"})
    assert resp.status_code == 200

    outro = usuarios["logistica"]["id"]
    assert medidor.put(f"/api/users/{outro}/senha", json={"novaSenha": "qualquer"}).status_code == 403

    c = app.test_client()
    assert login(c, "medidor@cortinados.pt", "nova-senha").status_code == 200


def test_sessao_de_login_expira(client, usuarios):
    resp = login(client, "gestor@cortinados.pt")
    cookies = [c for c in resp.headers.getlist("Set-Cookie") if c.startswith("session=")]
    assert cookies
    assert "Expires=" in cookies[0]


def test_login_com_campos_que_nao_sao_texto(client, usuarios):
    resp = client.post("/api/auth/login", json={"email": 5, "senha": "segredo123"})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Email e senha são obrigatórios"

    resp = client.post("/api/auth/login", json={"email": "gestor@cortinados.pt", "senha": ["x"]})
    assert resp.status_code == 400


def test_ativo_como_texto(como, usuarios):
    gestor = como("gestor")
    uid = usuarios["instalador"]["id"]

    resp = gestor.put(f"/api/users/{uid}", json={"ativo": "false"})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["ativo"] is False

    resp = gestor.put(f"/api/users/{uid}", json={"ativo": "sim"})
    assert resp.get_json()["data"]["ativo"] is True

    resp = gestor.put(f"/api/users/{uid}", json={"ativo": "talvez"})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Ativo deve ser verdadeiro ou falso"


def test_atualizacao_com_tipos_errados(como, usuarios):
    gestor = como("gestor")
    uid = usuarios["logistica"]["id"]

    resp = gestor.put(f"/api/users/{uid}", json={"email": 12345})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Email é obrigatório"

    resp = gestor.put(f"/api/users/{uid}", json={"telefone": 912345678})
    assert resp.get_json()["message"] == "Telefone inválido"

    resp = gestor.put(f"/api/users/{uid}", json={"empresa": ["Transportes"]})
    assert resp.get_json()["message"] == "Nome da empresa deve ser texto"

    dados = gestor.get(f"/api/users/{uid}").get_json()["data"]
    assert dados["email"] == "logistica@cortinados.pt"


def test_gestor_nao_se_desativa_nem_muda_o_proprio_role(como, usuarios):
    gestor = como("gestor")
    uid = usuarios["gestor"]["id"]

    resp = gestor.put(f"/api/users/{uid}", json={"ativo": False})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Não é possível desativar o próprio usuário"

    resp = gestor.put(f"/api/users/{uid}", json={"role": "medidor"})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Não é possível alterar o próprio role"

    # os outros campos continuam editáveis
    resp = gestor.put(f"/api/users/{uid}", json={"nome": "Gestor Geral", "role": "gestor", "ativo": True})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["nome"] == "Gestor Geral"
    assert gestor.get("/api/auth/me").status_code == 200
