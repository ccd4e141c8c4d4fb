# cortinados/routes/rastreamento_routes/__init__.py

from .etiqueta_routes import etiqueta_bp
from .rastreamento_routes import rastreamento_bp


def init_app(app):
    """Registra rastreamento público e etiquetas/QR no app."""
    app.register_blueprint(rastreamento_bp)
    app.register_blueprint(etiqueta_bp)


# Deixa explícito o que o pacote expõe
__all__ = ["rastreamento_bp", "etiqueta_bp", "init_app"]
