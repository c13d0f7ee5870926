# storefront/services/admin_service.py
from datetime import timedelta

from sqlalchemy.orm import Session

from storefront.data.models.admin import AdminModel
from storefront.domain.errors import ConflictError, NotFoundError, ValidationFailed
from storefront.domain.schemas import AdminCreate
from storefront.repos.admin_repo import AdminRepo
from storefront.services.notification_service import NotificationService
from storefront.utils.money import as_utc, utcnow
from storefront.utils.logging import get_logger
from storefront.utils.security import digest_token, hash_password, new_reset_token, verify_password

logger = get_logger(__name__)

RESET_TOKEN_TTL = timedelta(minutes=10)


class AdminService:
    """
    Back-office accounts. Login checks credentials and stamps last_login_at;
    issuing a session token is left to whatever fronts the API.
    """

    def __init__(self, db: Session, notification_service: NotificationService | None = None):
        self.repo = AdminRepo(db)
        self.notification_service = notification_service or NotificationService()

    def get_admin(self, admin_id: int) -> AdminModel:
        admin = self.repo.get_admin(admin_id)
        if not admin:
            raise NotFoundError(f"Admin with ID {admin_id} not found")
        return admin

    def get_by_email(self, email: str) -> AdminModel:
        admin = self.repo.get_by_email(email)
        if not admin:
            raise NotFoundError(f"Admin with email '{email}' not found")
        return admin

    def create_admin(self, payload: AdminCreate) -> AdminModel:
        email = payload.email.strip().lower()
        if self.repo.get_by_email(email):
            raise ConflictError("Admin with this email already exists")

        admin = AdminModel(
            email=email,
            password_hash=hash_password(payload.password),
            first_name=payload.first_name.strip(),
            last_name=payload.last_name.strip(),
            role=payload.role.value,
        )
        created = self.repo.create_admin(admin)
        logger.info(f"Created admin {created.id} ({created.role})")
        return created

    def authenticate(self, email: str, password: str) -> AdminModel:
        admin = self.repo.get_by_email(email)
        if not admin:
            logger.warning("Failed admin login attempt")
            raise ValidationFailed("Invalid credentials")
        if not admin.is_active:
            raise ValidationFailed("Account is deactivated")
        if not verify_password(password, admin.password_hash):
            logger.warning(f"Failed login attempt for admin {admin.id}")
            raise ValidationFailed("Invalid credentials")

        return self.repo.update_admin(admin, {"last_login_at": utcnow()})

    def set_active(self, admin_id: int, is_active: bool) -> AdminModel:
        admin = self.get_admin(admin_id)
        logger.info(f"Admin {admin_id} is_active={is_active}")
        return self.repo.update_admin(admin, {"is_active": is_active})

    def change_password(self, admin_id: int, current_password: str, new_password: str) -> None:
        admin = self.get_admin(admin_id)
        if not verify_password(current_password, admin.password_hash):
            raise ValidationFailed("Current password is incorrect")

        self._set_password(admin, new_password)
        logger.info(f"Password changed for admin {admin_id}")

    def forgot_password(self, email: str) -> str | None:
        """
        Issues a reset token valid for ten minutes, queues it for delivery
        and returns it.
        Unknown emails return None and change nothing, so the response does
        not tell which addresses have accounts.
        """
        admin = self.repo.get_by_email(email)
        if not admin:
            return None

        token, token_hash = new_reset_token()
        self.repo.update_admin(
            admin,
            {"password_reset_token": token_hash, "password_reset_expires": utcnow() + RESET_TOKEN_TTL},
        )
        self.notification_service.send_password_reset(admin.email, token)
        logger.info(f"Password reset requested for admin {admin.id}")
        return token

    def reset_password(self, token: str, new_password: str) -> None:
        admin = self.repo.get_by_reset_token(digest_token(token))
        if not admin or not admin.password_reset_expires or as_utc(admin.password_reset_expires) <= utcnow():
            raise ValidationFailed("Invalid or expired reset token")

        self._set_password(admin, new_password)
        logger.info(f"Password reset for admin {admin.id}")

    def _set_password(self, admin: AdminModel, new_password: str) -> None:
        self.repo.update_admin(
            admin,
            {
                "password_hash": hash_password(new_password),
                "password_changed_at": utcnow(),
                "password_reset_token": None,
                "password_reset_expires": None,
            },
        )
