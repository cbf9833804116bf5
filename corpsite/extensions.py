import json

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager
from flask_bcrypt import Bcrypt
from flask_cors import CORS
from sqlalchemy import MetaData

# named constraints so Flask-Migrate can drop/alter them on MySQL and SQLite
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def _json_dumps(value):
    # JSON columns keep non-ASCII text as-is (author names, SEO copy)
    return json.dumps(value, ensure_ascii=False)


cors = CORS()

db = SQLAlchemy(
    metadata=MetaData(naming_convention=NAMING_CONVENTION),
    engine_options={"json_serializer": _json_dumps},
)
migrate = Migrate(render_as_batch=True)

# bearer tokens for the access guard
jwt = JWTManager()

bcrypt = Bcrypt()
