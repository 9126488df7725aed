from functools import wraps

from flask import current_app, g, request
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from werkzeug.security import check_password_hash, generate_password_hash

from errors import Conflict, Unauthenticated, ValidationFailure
from models import User, db


MIN_PASSWORD_LENGTH = 6
TOKEN_SALT = "auth-token"


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt=TOKEN_SALT)


def issue_token(user: User) -> str:
    return _serializer().dumps({"user_id": user.id})


def verify_token(token: str):
    """Return the user id stored in ``token``, or None if it is invalid or expired."""
    max_age = current_app.config.get("TOKEN_MAX_AGE_SECONDS")
    try:
        data = _serializer().loads(token, max_age=max_age)
    except SignatureExpired:
        current_app.logger.info("Rejected expired auth token.")
        return None
    except BadSignature:
        return None
    if not isinstance(data, dict):
        return None
    return data.get("user_id")


def get_token_from_request():
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def token_required(view):
    # Resolves the bearer token to g.user_id before the view runs.
    @wraps(view)
    def wrapped(*args, **kwargs):
        token = get_token_from_request()
        if not token:
            raise Unauthenticated()
        user_id = verify_token(token)
        if not user_id or db.session.get(User, user_id) is None:
            raise Unauthenticated("Invalid token")
        g.user_id = user_id
        return view(*args, **kwargs)

    return wrapped


def signup(email, password, name=None) -> User:
    email = str(email or "").strip().lower()
    password = str(password or "")
    if not email or not password:
        raise ValidationFailure("Email and password are required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailure(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if User.query.filter_by(email=email).first() is not None:
        raise Conflict("User already exists")

    user = User(
        email=email,
        name=(str(name).strip() or None) if name else None,
        password_hash=generate_password_hash(password),
    )
    db.session.add(user)
    db.session.commit()
    current_app.logger.info("User %s signed up.", user.id)
    return user


def authenticate(email, password) -> User:
    email = str(email or "").strip().lower()
    password = str(password or "")
    if not email or not password:
        raise ValidationFailure("Email and password are required")
    user = User.query.filter_by(email=email).first()
    if user is None or not check_password_hash(user.password_hash, password):
        raise Unauthenticated("Invalid credentials")
    return user
