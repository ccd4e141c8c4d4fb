import pytest

from cortinados import create_app, db
from cortinados.models import Item, Projeto, Usuario
from cortinados.services import item_service, projeto_service

SENHA = "segredo123"
QR_BASE = "https://cortinados.test/track"

PROJETO_PAYLOAD = {
    "nomeHotel": "Hotel Tivoli Avenida",
    "endereco": "Av. da Liberdade 185",
    "cidade": "Lisboa",
    "distrito": "Lisboa",
    "codigoPostal": "1269-050",
    "contato": {
        "nome": "Ana Costa",
        "telefone": "+351 912 345 678",
        "email": "ana.costa@tivoli.pt",
    },
}

ROLES = ["medidor", "fabrica_trk", "fabrica_crt", "logistica", "instalador", "gestor"]


@pytest.fixture
def app():
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "teste",
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "QR_BASE_URL": QR_BASE,
        "PROJETO_PREFIXO": "LIS",
    })
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def usuarios(app):
    """Um usuário ativo por role: {role: {"id", "email"}}."""
    out = {}
    with app.app_context():
        for role in ROLES:
            u = Usuario(nome=f"Usuário {role}", email=f"{role}@cortinados.pt", role=role)
            u.set_password(SENHA)
            db.session.add(u)
        db.session.commit()
        for u in Usuario.query.all():
            out[u.role] = {"id": u.id, "email": u.email}
    return out


def login(client, email, senha=SENHA):
    return client.post("/api/auth/login", json={"email": email, "senha": senha})


@pytest.fixture
def como(app, usuarios):
    """Fábrica de clientes já autenticados: como("gestor")."""

    def _como(role):
        c = app.test_client()
        resp = login(c, usuarios[role]["email"])
        assert resp.status_code == 200, resp.get_json()
        return c

    return _como


@pytest.fixture
def projeto(app, usuarios):
    """Projeto LIS-0001 criado pelo gestor: {"id", "codigo"}."""
    with app.app_context():
        gestor = db.session.get(Usuario, usuarios["gestor"]["id"])
        p = projeto_service.criar_projeto(dict(PROJETO_PAYLOAD), gestor)
        return {"id": p.id, "codigo": p.codigo}


def criar_itens(app, projeto_id, tipo="calha", ambiente="Quarto 101", quantidade=1):
    with app.app_context():
        p = db.session.get(Projeto, projeto_id)
        itens = item_service.criar_itens(p, tipo, ambiente, quantidade)
        return [{"id": i.id, "codigo": i.codigo} for i in itens]


def forcar_status(app, item_id, status):
    with app.app_context():
        item = db.session.get(Item, item_id)
        item.status = status
        db.session.commit()
