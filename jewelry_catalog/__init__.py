import atexit
import logging
import os

import click
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager

db = SQLAlchemy()
login_manager = LoginManager()


def create_app(config_object="jewelry_catalog.config.Config"):
    app = Flask(__name__)

    # Configuration
    app.config.from_object(config_object)

    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("jewelry_catalog").setLevel(app.config["LOG_LEVEL"])
    app.logger.setLevel(app.config["LOG_LEVEL"])

    from jewelry_catalog.config import BASE_DIR
    os.makedirs(os.path.join(BASE_DIR, "instance"), exist_ok=True)

    # Extensions
    db.init_app(app)
    login_manager.init_app(app)

    # Flask-Login
    login_manager.login_view = 'auth.login'
    login_manager.login_message_category = 'info'

    @login_manager.user_loader
    def load_user(user_id):
        from jewelry_catalog.models.user import User
        return db.session.get(User, int(user_id))

    # Blueprints
    from jewelry_catalog.routes.public import public_bp
    from jewelry_catalog.routes.auth import auth_bp
    from jewelry_catalog.routes.dashboard import dashboard_bp

    app.register_blueprint(public_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)

    with app.app_context():
        from jewelry_catalog import models  # noqa: F401
        db.create_all()

    _init_gold_price(app)
    _register_commands(app)

    return app


def _init_gold_price(app):
    from jewelry_catalog.services.gold_price import make_fetcher
    from jewelry_catalog.services.price_poller import PricePoller

    poller = PricePoller(
        make_fetcher(
            app.config["GOLD_PRICE_API_URL"],
            field=app.config["GOLD_PRICE_FIELD"],
            timeout=app.config["GOLD_PRICE_TIMEOUT"],
        ),
        interval=app.config["GOLD_PRICE_INTERVAL"],
        fallback=app.config["GOLD_PRICE_FALLBACK"],
    )
    app.extensions["gold_price_poller"] = poller

    if app.config["GOLD_PRICE_POLLING"]:
        poller.start()
        atexit.register(poller.stop)

    @app.context_processor
    def inject_gold_price():
        return {"gold_price": poller.snapshot()}


def _register_commands(app):

    @app.cli.command("create-admin")
    @click.option("--username", default="admin")
    @click.password_option()
    def create_admin(username, password):
        """Create the admin user if it does not exist yet."""
        from jewelry_catalog.models.user import User

        admin = User.query.filter_by(username=username).first()
        if admin:
            click.echo(f"User {username} already exists")
            return

        admin_user = User(username=username, is_admin=True)
        admin_user.set_password(password)
        db.session.add(admin_user)
        db.session.commit()
        click.echo(f"Admin user created: {username}")

    @app.cli.command("policies-sql")
    def policies_sql():
        """Print the row level security migration for PostgreSQL."""
        from jewelry_catalog.security.policies import render_policy_sql
        click.echo(render_policy_sql())
