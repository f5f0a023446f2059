import logging
import os

from dotenv import load_dotenv
from flask import Flask, jsonify, render_template, request

from app.crm import models  # noqa: F401  (registers every collection on Base.metadata)
from app.crm.config import load_config
from app.crm.db import ENGINE_KEY, init_db
from app.crm.routes import bp as routes_bp
from app.crm.modules.categories.api import bp as categories_api_bp
from app.crm.modules.customers.api import bp as customers_api_bp
from app.crm.modules.customers.pages import bp as customer_pages_bp
from app.crm.modules.products.api import bp as products_api_bp


def create_app() -> Flask:
    load_dotenv()
    app = Flask(__name__, template_folder="templates", static_folder="static")
    app.config.from_mapping(load_config())
    app.json.sort_keys = False

    logging.getLogger("app.crm").setLevel(app.config["LOG_LEVEL"])

    @app.context_processor
    def _inject_api_base_url() -> dict:
        return {"api_base_url": app.config["API_BASE_URL"]}

    @app.template_filter("dateformat")
    def _dateformat_filter(value, format: str = "%Y-%m-%d") -> str:
        if value is None:
            return "—"
        if hasattr(value, "strftime"):
            return value.strftime(format)
        return str(value)

    # Production guardrails (fail fast with clear logs)
    env = (app.config.get("ENV") or "").strip().lower()
    if env in ("prod", "production"):
        if not app.config.get("DATABASE_URL") or str(app.config["DATABASE_URL"]).strip() == "":
            raise RuntimeError("DATABASE_URL is required in production.")
        if str(app.config["DATABASE_URL"]).startswith("sqlite"):
            raise RuntimeError("DATABASE_URL must not be sqlite in production.")
        if not app.config.get("SECRET_KEY") or str(app.config["SECRET_KEY"]) in ("", "change-me"):
            raise RuntimeError("SECRET_KEY must be set to a strong value in production (not default).")

    init_db(app)

    def _dispose_engine_on_fork() -> None:
        if hasattr(os, "register_at_fork"):
            def _after_fork_child():
                engine = app.extensions.get(ENGINE_KEY)
                if engine:
                    engine.dispose()
                    app.logger.info("Disposed DB engine after fork (pid=%s)", os.getpid())

            os.register_at_fork(after_in_child=_after_fork_child)

    _dispose_engine_on_fork()

    app.register_blueprint(routes_bp)
    app.register_blueprint(categories_api_bp, url_prefix="/api")
    app.register_blueprint(customers_api_bp, url_prefix="/api")
    app.register_blueprint(products_api_bp, url_prefix="/api")
    app.register_blueprint(customer_pages_bp)

    @app.errorhandler(404)
    def _err_404(e):  # type: ignore[no-redef]
        if request.path.startswith("/api/"):
            return jsonify({"error": "Not found"}), 404
        return render_template("errors/404.html", message="Page not found"), 404

    @app.errorhandler(500)
    def _err_500(e):  # type: ignore[no-redef]
        app.logger.exception("Unhandled 500 path=%s", request.path)
        if request.path.startswith("/api/"):
            return jsonify({"error": "Internal server error"}), 500
        return render_template("errors/500.html"), 500

    logging.getLogger(__name__).info("create_app() complete; app ready to serve")

    return app
