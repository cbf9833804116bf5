# corpsite/services/auth.py
import logging

from flask_jwt_extended import create_access_token

from corpsite.errors import AuthError, ConflictError, ValidationError
from corpsite.extensions import bcrypt
from corpsite.models import User
from corpsite.validation import Validator, clean_str

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class AuthService:
    """Account operations behind the auth routes; the session is injected."""

    def __init__(self, session):
        self.session = session

    @staticmethod
    def create_token(user):
        return create_access_token(
            identity=str(user.id),
            additional_claims={
                "role": user.role,
                "email": user.email
            },
        )

    @staticmethod
    def hash_password(password):
        return bcrypt.generate_password_hash(password).decode("utf-8")

    def find_by_email(self, email):
        return self.session.query(User).filter_by(email=(email or "").strip().lower()).first()

    def get_user(self, user_id):
        return self.session.get(User, user_id)

    def authenticate_user(self, email, password):
        """
        Check email & password using bcrypt.
        Return (token, user) if valid.
        """
        if not email or not password:
            raise ValidationError(
                {"credentials": "Please provide email and password"},
                message="Please provide email and password",
            )

        logger.info("Auth attempt: %s", email)
        user = self.find_by_email(email)

        # Same message for unknown email and bad password
        if not user or not bcrypt.check_password_hash(user.password, password):
            logger.info("Auth failed for %s", email)
            raise AuthError("Invalid email or password")

        if not user.is_active:
            raise AuthError("User account is deactivated")

        logger.info("Auth successful for %s, role: %s", user.email, user.role)
        return self.create_token(user), user

    def register(self, name, email, password, role="user"):
        """
        Create a new user.
        Return (token, user) after successful registration.
        """
        data = {"name": clean_str(name), "email": clean_str(email), "password": password}
        validator = (
            Validator(data)
            .required("name", "Name is required")
            .max_length("name", 100, "Name cannot exceed 100 characters")
            .required("email", "Email is required")
            .email("email")
            .max_length("email", 255, "Email cannot exceed 255 characters")
            .required("password", "Password is required")
        )
        if password and len(password) < MIN_PASSWORD_LENGTH:
            validator.fail("password", f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        validator.check()

        # Check if email already used
        if self.find_by_email(email):
            raise ConflictError("User already exists with this email")

        user = User(
            name=data["name"],
            email=data["email"].lower(),
            password=self.hash_password(password),
            role=role
        )
        self.session.add(user)
        self.session.commit()
        logger.info("Registration successful for %s", user.email)

        return self.create_token(user), user

    def update_profile(self, user, name=None, email=None):
        data = {"name": clean_str(name) or user.name, "email": (clean_str(email) or user.email).lower()}
        (
            Validator(data)
            .max_length("name", 100, "Name cannot exceed 100 characters")
            .email("email")
            .max_length("email", 255, "Email cannot exceed 255 characters")
            .check()
        )

        # email must stay unique across other users
        existing = self.find_by_email(data["email"])
        if existing is not None and existing.id != user.id:
            raise ConflictError("Email already exists")

        user.name = data["name"]
        user.email = data["email"]
        self.session.commit()
        return user

    def change_password(self, user, current_password, new_password):
        if not current_password or not new_password:
            raise ValidationError(
                {"password": "Please provide current and new password"},
                message="Please provide current and new password",
            )
        if not bcrypt.check_password_hash(user.password, current_password):
            raise ValidationError(
                {"currentPassword": "Current password is incorrect"},
                message="Current password is incorrect",
            )
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                {"newPassword": f"Password must be at least {MIN_PASSWORD_LENGTH} characters"}
            )

        user.password = self.hash_password(new_password)
        self.session.commit()
        logger.info("Password changed for %s", user.email)

    def set_admin_password(self, email, password, name="Administrator"):
        """Reset an admin's password, creating the admin if the email is unknown."""
        user = self.find_by_email(email)
        if user is None:
            user = User(name=name, email=email.strip().lower(), role="admin")
            self.session.add(user)
        user.password = self.hash_password(password)
        user.role = "admin"
        user.is_active = True
        self.session.commit()
        return user
