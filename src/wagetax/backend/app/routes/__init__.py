"""Blueprint registrations for application routes."""

from flask import Flask

from .calculations import blueprint as calculations_blueprint
from .profiles import blueprint as profiles_blueprint
from .series import blueprint as series_blueprint


def register_routes(app: Flask) -> None:
    """Register all Flask blueprints with the provided application."""

    app.register_blueprint(calculations_blueprint)
    app.register_blueprint(profiles_blueprint)
    app.register_blueprint(series_blueprint)
