"""
SQLAlchemy implementation of user persistence.

The repository works inside a session owned by the caller; it flushes so that
constraint violations surface here and are translated to ``ConflictError``.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from service.dal.sql_models import AuditLogModel, UserModel
from service.handlers.utils.errors import ConflictError
from service.handlers.utils.observability import logger, tracer

EMAIL_IN_USE_MESSAGE = 'El email ya está registrado'


class UserRepository:
    """Data access for ``users`` and their ``audit_logs``."""

    def __init__(self, session: Session) -> None:
        self.session = session

    @tracer.capture_method
    def list(self, offset: int, limit: int) -> Tuple[List[UserModel], int]:
        """Active users ordered by id, plus the total number of active users."""
        active = UserModel.deleted_at.is_(None)
        total = self.session.scalar(select(func.count()).select_from(UserModel).where(active))
        users = self.session.scalars(
            select(UserModel).where(active).order_by(UserModel.id).offset(offset).limit(limit)
        ).all()
        return list(users), total or 0

    def get(self, user_id: int) -> Optional[UserModel]:
        return self.session.scalar(
            select(UserModel).where(UserModel.id == user_id, UserModel.deleted_at.is_(None))
        )

    def email_taken(self, email: str, exclude_user_id: Optional[int] = None) -> bool:
        """Whether any row, soft-deleted included, already uses ``email``."""
        query = select(UserModel.id).where(func.lower(UserModel.email) == email.lower())
        if exclude_user_id is not None:
            query = query.where(UserModel.id != exclude_user_id)
        return self.session.scalar(query.limit(1)) is not None

    @tracer.capture_method
    def create(self, email: str, first_name: str, last_name: str) -> UserModel:
        """
        Insert a user.

        Raises:
            ConflictError: If the email is already registered
        """
        if self.email_taken(email):
            raise ConflictError(EMAIL_IN_USE_MESSAGE)
        user = UserModel(email=email.lower(), first_name=first_name, last_name=last_name)
        self.session.add(user)
        self._flush()
        self.session.refresh(user)
        logger.info('User created', extra={'user_id': user.id})
        return user

    @tracer.capture_method
    def update(self, user: UserModel, changes: Dict[str, Any]) -> UserModel:
        """
        Apply column changes to ``user``.

        Raises:
            ConflictError: If the new email belongs to another user
        """
        email = changes.get('email')
        if email is not None and self.email_taken(email, exclude_user_id=user.id):
            raise ConflictError(EMAIL_IN_USE_MESSAGE)
        for column, value in changes.items():
            setattr(user, column, value.lower() if column == 'email' else value)
        user.updated_at = datetime.now(timezone.utc)
        self._flush()
        self.session.refresh(user)
        return user

    @tracer.capture_method
    def soft_delete(self, user: UserModel) -> None:
        user.deleted_at = datetime.now(timezone.utc)
        self._flush()
        logger.info('User soft deleted', extra={'user_id': user.id})

    def record_audit(
        self,
        action: str,
        entity_id: Optional[int],
        changes: Optional[Dict[str, Any]] = None,
        user_id: Optional[int] = None,
        entity: str = 'user',
    ) -> AuditLogModel:
        entry = AuditLogModel(
            user_id=user_id,
            action=action,
            entity=entity,
            entity_id=str(entity_id) if entity_id is not None else None,
            changes=changes,
        )
        self.session.add(entry)
        self._flush()
        return entry

    def _flush(self) -> None:
        try:
            self.session.flush()
        except IntegrityError as exc:
            logger.warning('Integrity constraint violated', extra={'constraint_error': exc.orig.__class__.__name__})
            raise ConflictError() from exc
