from flask import Flask

from .config import Config


def create_app(config_overrides=None):
    app = Flask(__name__)

    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    # Register blueprints
    from .routes import main_blueprint
    app.register_blueprint(main_blueprint)

    return app
