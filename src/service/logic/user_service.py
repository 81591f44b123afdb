"""
Business logic for user profiles.

Every write runs in one transaction together with its audit log row, so a
user change is never committed without its audit trail.
"""

from typing import Any, Dict

from service.dal.sql_connection import SqlConnectionManager
from service.dal.user_repository import UserRepository
from service.handlers.utils.errors import NotFoundError
from service.handlers.utils.observability import tracer
from service.models.input import CreateUserRequest, PaginationParams, UpdateUserRequest
from service.models.output import UserListOutput, UserOutput

USER_NOT_FOUND_MESSAGE = 'Usuario no encontrado'


class UserService:
    def __init__(self, connection: SqlConnectionManager) -> None:
        self.connection = connection

    @tracer.capture_method
    def list_users(self, pagination: PaginationParams) -> Dict[str, Any]:
        with self.connection.session() as session:
            users, total = UserRepository(session).list(offset=pagination.offset, limit=pagination.page_size)
            return UserListOutput(
                users=[UserOutput.model_validate(user) for user in users],
                total=total,
                page=pagination.page,
                page_size=pagination.page_size,
            ).to_response()

    @tracer.capture_method
    def get_user(self, user_id: int) -> Dict[str, Any]:
        with self.connection.session() as session:
            user = UserRepository(session).get(user_id)
            if user is None:
                raise NotFoundError(USER_NOT_FOUND_MESSAGE)
            return UserOutput.model_validate(user).to_response()

    @tracer.capture_method
    def create_user(self, request: CreateUserRequest) -> Dict[str, Any]:
        """
        Register a user profile.

        Raises:
            ConflictError: If the email is already registered
        """
        with self.connection.session() as session:
            repository = UserRepository(session)
            user = repository.create(email=request.email, first_name=request.first_name, last_name=request.last_name)
            repository.record_audit('create', entity_id=user.id, user_id=user.id, changes=request.changes())
            return UserOutput.model_validate(user).to_response()

    @tracer.capture_method
    def update_user(self, user_id: int, request: UpdateUserRequest) -> Dict[str, Any]:
        with self.connection.session() as session:
            repository = UserRepository(session)
            user = repository.get(user_id)
            if user is None:
                raise NotFoundError(USER_NOT_FOUND_MESSAGE)
            user = repository.update(user, request.changes(by_alias=False))
            repository.record_audit('update', entity_id=user.id, user_id=user.id, changes=request.changes())
            return UserOutput.model_validate(user).to_response()

    @tracer.capture_method
    def delete_user(self, user_id: int) -> None:
        with self.connection.session() as session:
            repository = UserRepository(session)
            user = repository.get(user_id)
            if user is None:
                raise NotFoundError(USER_NOT_FOUND_MESSAGE)
            repository.soft_delete(user)
            repository.record_audit('delete', entity_id=user.id, user_id=user.id)
