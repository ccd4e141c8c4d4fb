from urllib.parse import unquote

from cortinados import db
from cortinados.models import Item

from conftest import criar_itens, forcar_status, login


def test_dashboard_gestor(app, como, projeto):
    itens = criar_itens(app, projeto["id"], "calha", quantidade=4)
    forcar_status(app, itens[0]["id"], "instalado")
    forcar_status(app, itens[1]["id"], "producao")

    data = como("gestor").get("/api/dashboard/gestor").get_json()["data"]
    assert data["totalProjetos"] == 1
    assert data["projetosAtivos"] == 1
    assert data["totalItens"] == 4
    assert data["itensPendentes"] == 2
    assert data["itensProducao"] == 1
    assert data["eficienciaGeral"] == 25
    assert data["projetosRecentes"][0]["progresso"]["instalados"] == 1


def test_dashboard_fabrica_so_ve_o_seu_tipo(app, como, projeto):
    calha = criar_itens(app, projeto["id"], "calha")[0]
    cortina = criar_itens(app, projeto["id"], "cortina")[0]
    forcar_status(app, calha["id"], "medido")
    forcar_status(app, cortina["id"], "medido")

    # ?tipo é ignorado para as fábricas
    trk = como("fabrica_trk").get("/api/dashboard/fabrica?tipo=cortina").get_json()["data"]
    assert trk["tipo"] == "calha"
    assert [i["codigo"] for i in trk["aguardandoProducao"]] == [calha["codigo"]]
    assert trk["aguardandoProducao"][0]["acoes"] == ["producao"]

    crt = como("fabrica_crt").get("/api/dashboard/fabrica").get_json()["data"]
    assert [i["codigo"] for i in crt["aguardandoProducao"]] == [cortina["codigo"]]

    gestor = como("gestor").get("/api/dashboard/fabrica?tipo=cortina").get_json()["data"]
    assert gestor["tipo"] == "cortina"
    assert como("gestor").get("/api/dashboard/fabrica?tipo=persiana").status_code == 400


def test_dashboard_logistica_e_instalador(app, como, projeto):
    itens = criar_itens(app, projeto["id"], "cortina", quantidade=3)
    forcar_status(app, itens[0]["id"], "produzido")
    forcar_status(app, itens[1]["id"], "logistica")
    forcar_status(app, itens[2]["id"], "instalado")

    log = como("logistica").get("/api/dashboard/logistica").get_json()["data"]
    assert len(log["aguardandoRecebimento"]) == 1
    assert log["aguardandoRecebimento"][0]["acoes"] == ["logistica"]
    assert len(log["emLogistica"]) == 1

    inst = como("instalador").get("/api/dashboard/instalador").get_json()["data"]
    assert [i["id"] for i in inst["prontosParaInstalar"]] == [itens[1]["id"]]
    assert inst["prontosParaInstalar"][0]["acoes"] == ["instalado"]
    assert [i["id"] for i in inst["instaladosRecentes"]] == [itens[2]["id"]]


def test_dashboard_medidor(app, como, projeto):
    criar_itens(app, projeto["id"], "calha", quantidade=2)
    data = como("medidor").get("/api/dashboard/medidor").get_json()["data"]
    assert data["stats"]["medicoes"]["hoje"] == 0
    assert data["projetosComPendentes"][0]["totalItensPendentes"] == 2


def test_dashboard_api_por_role(como):
    assert como("medidor").get("/api/dashboard/gestor").status_code == 403
    assert como("logistica").get("/api/dashboard/fabrica").status_code == 403
    assert como("gestor").get("/api/dashboard/instalador").status_code == 200


def test_pagina_dashboard_redireciona_pelo_role(como):
    resp = como("fabrica_crt").get("/dashboard")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/dashboard/fabrica")

    resp = como("medidor").get("/dashboard", follow_redirects=True)
    assert resp.status_code == 200
    assert "Dashboard: medidor" in resp.get_data(as_text=True)


def test_pagina_de_outro_role_volta_com_access_denied(como):
    medidor = como("medidor")
    resp = medidor.get("/dashboard/gestor")
    assert resp.status_code == 302
    assert "error=access_denied" in resp.headers["Location"]

    resp = medidor.get("/dashboard/gestor", follow_redirects=True)
    html = resp.get_data(as_text=True)
    assert "Acesso negado" in html
    assert "Dashboard: medidor" in html


def test_gestor_acessa_qualquer_painel(app, como, projeto):
    criar_itens(app, projeto["id"], "calha")
    gestor = como("gestor")
    for area in ("gestor", "fabrica", "logistica", "instalador", "medidor"):
        assert gestor.get(f"/dashboard/{area}").status_code == 200
    assert gestor.get("/dashboard/inexistente").status_code == 404


def test_pagina_sem_login_vai_para_o_login(client):
    resp = client.get("/dashboard/gestor")
    assert resp.status_code == 302
    assert "next=/dashboard/gestor" in unquote(resp.headers["Location"])


def test_login_pela_pagina(client, usuarios):
    assert client.get("/").status_code == 200
    resp = client.post(
        "/?next=/dashboard/logistica",
        data={"email": "logistica@cortinados.pt", "senha": "segredo123"},
    )
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/dashboard/logistica")

    # já logado, a página de login manda para o painel
    assert client.get("/").status_code == 302


def test_login_pela_pagina_senha_errada(app, usuarios):
    c = app.test_client()
    resp = c.post("/", data={"email": "logistica@cortinados.pt", "senha": "x"})
    assert resp.status_code == 200
    assert "Email ou senha incorretos." in resp.get_data(as_text=True)
    # API continua exigindo login
    assert login(c, "logistica@cortinados.pt", "x").status_code == 401


def test_login_pela_pagina_recusa_next_externo(usuarios, app):
    dados = {"email": "logistica@cortinados.pt", "senha": "segredo123"}
    for nxt in ("/\\evil.com", "//evil.com", "https://evil.com/x", "/\\/evil.com"):
        c = app.test_client()
        resp = c.post("/", query_string={"next": nxt}, data=dados)
        assert resp.status_code == 302
        assert resp.headers["Location"].endswith("/dashboard"), nxt


def test_tipo_invalido_na_pagina_da_fabrica(como):
    gestor = como("gestor")
    resp = gestor.get("/dashboard/fabrica?tipo=xyz")
    assert resp.status_code == 302
    assert "error=tipo_invalido" in resp.headers["Location"]

    html = gestor.get("/dashboard/fabrica?tipo=xyz", follow_redirects=True).get_data(as_text=True)
    assert "Tipo inválido" in html
    assert "Tipo: <b>calha</b>" in html


def test_botoes_do_painel_mudam_o_status(app, como, projeto):
    calha = criar_itens(app, projeto["id"], "calha")[0]
    forcar_status(app, calha["id"], "medido")
    fabrica = como("fabrica_trk")

    html = fabrica.get("/dashboard/fabrica").get_data(as_text=True)
    assert f'action="/dashboard/itens/{calha["id"]}/status"' in html

    resp = fabrica.post(
        f"/dashboard/itens/{calha['id']}/status", data={"status": "producao", "voltar": "fabrica"}
    )
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/dashboard/fabrica")
    html = fabrica.get("/dashboard/fabrica").get_data(as_text=True)
    assert "Item LIS-0001-01-TRK atualizado de medido para producao" in html

    with app.app_context():
        assert db.session.get(Item, calha["id"]).status == "producao"


def test_botao_do_painel_com_transicao_negada(app, como, projeto):
    calha = criar_itens(app, projeto["id"], "calha")[0]
    forcar_status(app, calha["id"], "medido")

    resp = como("fabrica_crt").post(
        f"/dashboard/itens/{calha['id']}/status",
        data={"status": "producao", "voltar": "fabrica"},
        follow_redirects=True,
    )
    assert resp.status_code == 200
    assert "Fábrica CRT só pode atualizar cortinas" in resp.get_data(as_text=True)
    with app.app_context():
        assert db.session.get(Item, calha["id"]).status == "medido"

    # item inexistente volta para o painel do role
    resp = como("logistica").post("/dashboard/itens/999/status", data={"status": "logistica"})
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/dashboard/logistica")


def test_scanner(app, como, client, projeto):
    item = criar_itens(app, projeto["id"], "calha")[0]
    instalador = como("instalador")

    assert instalador.get("/dashboard/scanner").status_code == 200

    resp = instalador.get("/dashboard/scanner?codigo=lis-0001-01-trk")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith(f"/track/{item['codigo']}")

    resp = instalador.get("/dashboard/scanner", query_string={"codigo": "https://cortinados.test/track/LIS-0001-01-TRK"})
    assert resp.headers["Location"].endswith("/track/LIS-0001-01-TRK")

    resp = instalador.get("/dashboard/scanner?codigo=LIS-0001-42-TRK")
    assert resp.status_code == 200
    assert "Item LIS-0001-42-TRK não encontrado" in resp.get_data(as_text=True)

    resp = client.get("/dashboard/scanner")
    assert resp.status_code == 302
    assert "next=/dashboard/scanner" in unquote(resp.headers["Location"])
