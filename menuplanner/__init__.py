import logging
import os
from datetime import timedelta

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS

from menuplanner import constants
from menuplanner.extensions import db, jwt, migrate
from menuplanner.errors import register_error_handlers
from menuplanner.utils.parsing import parse_bool
from .api import auth_bp, categories_bp, menus_bp, recipes_bp

load_dotenv()


def _register_jwt_handlers():
    def unauthorized(reason):
        return jsonify({'code': constants.E_UNAUTHORIZED, 'message': constants.E_UNAUTHORIZED_MSG, 'data': reason}), 401

    jwt.unauthorized_loader(unauthorized)
    jwt.invalid_token_loader(unauthorized)
    jwt.expired_token_loader(lambda header, payload: unauthorized('Token has expired'))


def create_app(config_overrides=None):
    app = Flask(__name__)

    app.config.update(
        SECRET_KEY=os.getenv('SECRET_KEY'),
        SQLALCHEMY_DATABASE_URI=os.getenv('DATABASE_URL', 'sqlite:///menuplanner.db'),
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        SQLALCHEMY_ENGINE_OPTIONS={'pool_pre_ping': True},
        JWT_SECRET_KEY=os.getenv('JWT_SECRET_KEY'),
        JWT_TOKEN_LOCATION=["headers"],
        JWT_HEADER_NAME="Authorization",
        JWT_HEADER_TYPE="Bearer",
        JWT_ACCESS_TOKEN_EXPIRES=timedelta(days=int(os.getenv('JWT_EXPIRES_DAYS', 7))),
        ALLOW_REGISTRATION=parse_bool(os.getenv('ALLOW_REGISTRATION')),
        API_KEY_LENGTH=int(os.getenv('API_KEY_LENGTH', 40)),
        LOG_LEVEL=os.getenv('LOG_LEVEL', 'INFO'),
        CORS_ORIGINS=os.getenv('CORS_ORIGINS', '*'),
    )
    if config_overrides:
        app.config.update(config_overrides)

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s [%(name)s]: %(message)s',
    )
    app.logger.setLevel(app.config['LOG_LEVEL'])

    CORS(app, resources={r"/api/*": {"origins": app.config['CORS_ORIGINS'],
                                     "allow_headers": ["Authorization", "Content-Type"]}})

    # one pool per process, disposed by Flask-SQLAlchemy on shutdown
    db.init_app(app)
    jwt.init_app(app)
    _register_jwt_handlers()
    migrate.init_app(app, db)
    register_error_handlers(app)

    app.register_blueprint(recipes_bp, url_prefix='/api/v1/recipes')
    app.register_blueprint(categories_bp, url_prefix='/api/v1/categories')
    app.register_blueprint(menus_bp, url_prefix='/api/v1/menus')
    app.register_blueprint(auth_bp, url_prefix='/api/v1/auth')

    from .cli import register_commands
    register_commands(app)

    # never log the full URI, it may carry a password
    app.logger.info("App created (database driver: %s)", app.config['SQLALCHEMY_DATABASE_URI'].split(':', 1)[0])
    return app
