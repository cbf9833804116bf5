import logging

from flask import Flask
from pymysql import connect
from sqlalchemy.engine import make_url

from config import Config
from .extensions import bcrypt, cors, db, jwt, migrate
from .errors import register_error_handlers
from .responses import success_response
from . import models  # noqa: F401  (register tables)
from .routes.auth_routes import auth_bp
from .routes.job_routes import jobs_bp
from .routes.application_routes import applications_bp
from .routes.blog_routes import blogs_bp
from .routes.contact_routes import contact_bp
from .routes.dashboard_routes import dashboard_bp
from .database.seed.seed_all import seed_all
from .database.seed.reset_admin import reset_admin_password

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app)

    # Allow CORS from the site frontend
    cors.init_app(app, resources={r"/api/*": {"origins": app.config["CLIENT_URL"]}}, supports_credentials=True)

    create_database_if_not_exists(app.config["SQLALCHEMY_DATABASE_URI"])

    # extensions initialization
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    bcrypt.init_app(app)

    register_error_handlers(app)

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(contact_bp, url_prefix="/api/contact")
    app.register_blueprint(blogs_bp, url_prefix="/api/blogs")
    app.register_blueprint(applications_bp, url_prefix="/api/applications")
    app.register_blueprint(jobs_bp, url_prefix="/api/jobs")
    app.register_blueprint(dashboard_bp, url_prefix="/api/dashboard")

    @app.route("/api/health", methods=["GET"])
    def health():
        return success_response("Backend is running smoothly", version=VERSION)

    app.cli.add_command(seed_all)
    app.cli.add_command(reset_admin_password)

    if app.config.get("AUTO_CREATE_TABLES"):
        with app.app_context():
            db.create_all()

    logger.info("App created (env: %s)", app.config.get("APP_ENV"))
    return app


def configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    logging.getLogger("corpsite").setLevel(level)
    app.logger.setLevel(level)


def create_database_if_not_exists(uri):
    url = make_url(uri)
    if not url.drivername.startswith("mysql") or not url.database:
        return

    logger.info("Ensuring database '%s' exists on %s:%s", url.database, url.host, url.port or 3306)
    conn = connect(
        host=url.host,
        port=url.port or 3306,
        user=url.username,
        password=url.password or ""
    )
    try:
        with conn.cursor() as cursor:
            cursor.execute(f"CREATE DATABASE IF NOT EXISTS `{url.database}`")
        conn.commit()
    finally:
        conn.close()
